import datetime as dt
from collections.abc import Callable, Iterable
from typing import Protocol

from clinic.domain.models import Appointment, Doctor, Patient

Clock = Callable[[], dt.datetime]


class ClinicStore(Protocol):
    """Holds every patient, doctor and appointment, keyed by identifier.

    Lookups of an unknown identifier raise ``UnknownReferenceError``.
    Adding a record under an identifier that is already taken raises
    ``ValidationError``.
    """

    def add_patient(self, patient: Patient) -> None:
        """Register a new patient."""
        ...

    def get_patient(self, patient_id: str) -> Patient:
        """Fetch a patient by id."""
        ...

    def list_patients(self) -> list[Patient]:
        """All patients in registration order."""
        ...

    def add_doctor(self, doctor: Doctor) -> None:
        """Register a new doctor."""
        ...

    def get_doctor(self, doctor_id: str) -> Doctor:
        """Fetch a doctor by id."""
        ...

    def list_doctors(self) -> list[Doctor]:
        """All doctors in registration order."""
        ...

    def add_appointment(self, appointment: Appointment) -> None:
        """Store a newly booked appointment."""
        ...

    def get_appointment(self, appointment_id: str) -> Appointment:
        """Fetch the current version of an appointment."""
        ...

    def save_appointment(self, appointment: Appointment) -> None:
        """Replace the stored version of an existing appointment."""
        ...

    def appointments_for(self, appointment_ids: Iterable[str]) -> list[Appointment]:
        """Resolve ids to appointments, preserving the given order."""
        ...

    def list_appointments(self) -> list[Appointment]:
        """All appointments in booking order."""
        ...
