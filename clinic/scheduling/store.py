from collections.abc import Iterable

from clinic.domain.exceptions import UnknownReferenceError, ValidationError
from clinic.domain.models import Appointment, Doctor, Patient


class InMemoryClinicStore:
    """Dictionary-backed implementation of the ``ClinicStore`` protocol.

    Records reference each other by id only, so the store is the single
    owner of every object. Insertion order is kept, which gives booking
    order for appointments.
    """

    def __init__(self) -> None:
        self._patients: dict[str, Patient] = {}
        self._doctors: dict[str, Doctor] = {}
        self._appointments: dict[str, Appointment] = {}

    def add_patient(self, patient: Patient) -> None:
        if patient.patient_id in self._patients:
            raise ValidationError(
                f"Patient {patient.patient_id} is already registered.", field="patient_id"
            )
        self._patients[patient.patient_id] = patient

    def get_patient(self, patient_id: str) -> Patient:
        try:
            return self._patients[patient_id]
        except KeyError:
            raise UnknownReferenceError("patient", patient_id) from None

    def list_patients(self) -> list[Patient]:
        return list(self._patients.values())

    def add_doctor(self, doctor: Doctor) -> None:
        if doctor.doctor_id in self._doctors:
            raise ValidationError(
                f"Doctor {doctor.doctor_id} is already registered.", field="doctor_id"
            )
        self._doctors[doctor.doctor_id] = doctor

    def get_doctor(self, doctor_id: str) -> Doctor:
        try:
            return self._doctors[doctor_id]
        except KeyError:
            raise UnknownReferenceError("doctor", doctor_id) from None

    def list_doctors(self) -> list[Doctor]:
        return list(self._doctors.values())

    def add_appointment(self, appointment: Appointment) -> None:
        if appointment.appointment_id in self._appointments:
            raise ValidationError(
                f"Appointment {appointment.appointment_id} already exists.",
                field="appointment_id",
            )
        self._appointments[appointment.appointment_id] = appointment

    def get_appointment(self, appointment_id: str) -> Appointment:
        try:
            return self._appointments[appointment_id]
        except KeyError:
            raise UnknownReferenceError("appointment", appointment_id) from None

    def save_appointment(self, appointment: Appointment) -> None:
        # Raises for ids that were never added
        self.get_appointment(appointment.appointment_id)
        self._appointments[appointment.appointment_id] = appointment

    def appointments_for(self, appointment_ids: Iterable[str]) -> list[Appointment]:
        return [self.get_appointment(appointment_id) for appointment_id in appointment_ids]

    def list_appointments(self) -> list[Appointment]:
        return list(self._appointments.values())
