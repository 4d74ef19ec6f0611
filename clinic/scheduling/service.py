import datetime as dt
from typing import Any

from loguru import logger

from clinic.config import ClinicConfig
from clinic.domain.exceptions import ClinicError, ValidationError
from clinic.domain.models import Appointment, AppointmentStatus, Doctor, Patient
from clinic.scheduling import rules
from clinic.scheduling.ports import ClinicStore, Clock


class ClinicService:
    """Registers clinic records and owns every change to appointments and schedules.

    Nothing else mutates an appointment's date or a doctor's schedule, so
    the date rules and the conflict check always run before a change is
    stored. Failed operations leave the store untouched.
    """

    def __init__(
        self,
        store: ClinicStore,
        config: ClinicConfig | None = None,
        clock: Clock = dt.datetime.now,
    ) -> None:
        self._store = store
        self._config = config or ClinicConfig()
        self._clock = clock

    @property
    def config(self) -> ClinicConfig:
        return self._config

    def now(self) -> dt.datetime:
        return self._clock()

    # Patients and doctors

    def register_patient(
        self, name: str, date_of_birth: dt.date, patient_id: str | None = None
    ) -> Patient:
        patient = Patient.create(name, date_of_birth, now=self._clock(), patient_id=patient_id)
        self._store.add_patient(patient)
        logger.info("Registered patient: id={}", patient.patient_id)
        return patient

    def register_doctor(
        self, name: str, specialization: str, doctor_id: str | None = None
    ) -> Doctor:
        fields: dict[str, Any] = {"name": name, "specialization": specialization}
        if doctor_id is not None:
            fields["doctor_id"] = doctor_id
        doctor = Doctor(**fields)
        self._store.add_doctor(doctor)
        logger.info("Registered doctor: id={}, specialization={}", doctor.doctor_id, specialization)
        return doctor

    def update_doctor(
        self,
        doctor_id: str,
        name: str | None = None,
        specialization: str | None = None,
    ) -> Doctor:
        """Change a doctor's name and/or specialization.

        Both values are validated before either is applied.
        """
        doctor = self._store.get_doctor(doctor_id)
        new_name = doctor.name if name is None else name
        new_specialization = doctor.specialization if specialization is None else specialization
        Doctor(doctor_id=doctor_id, name=new_name, specialization=new_specialization)

        doctor.name = new_name
        doctor.specialization = new_specialization
        logger.info("Updated doctor: id={}", doctor_id)
        return doctor

    def add_medical_entry(self, patient_id: str, text: str) -> Patient:
        patient = self._store.get_patient(patient_id)
        patient.add_medical_entry(text, now=self._clock())
        logger.info("Added medical entry for patient: id={}", patient_id)
        return patient

    def get_patient(self, patient_id: str) -> Patient:
        return self._store.get_patient(patient_id)

    def get_doctor(self, doctor_id: str) -> Doctor:
        return self._store.get_doctor(doctor_id)

    def get_appointment(self, appointment_id: str) -> Appointment:
        return self._store.get_appointment(appointment_id)

    # Appointments

    def book_appointment(
        self,
        date: dt.datetime,
        patient_id: str | None,
        doctor_id: str | None,
        appointment_id: str | None = None,
    ) -> Appointment:
        """Book a new appointment and add it to the doctor's schedule.

        Args:
            date: Requested start of the appointment.
            patient_id: Id of a registered patient.
            doctor_id: Id of a registered doctor.
            appointment_id: Optional id to use instead of a generated one.

        Returns:
            The stored appointment, status ``Scheduled``.

        Raises:
            ValidationError: If a reference is missing or unknown, the date is
                in the past or on a closed weekday.
            ConflictError: If the doctor already has an appointment within the
                conflict window.
        """
        logger.info("Booking appointment: doctor={}, date={}", doctor_id, date)

        try:
            if not patient_id:
                raise ValidationError("Appointment requires a patient.", field="patient_id")
            if not doctor_id:
                raise ValidationError("Appointment requires a doctor.", field="doctor_id")
            self._store.get_patient(patient_id)
            doctor = self._store.get_doctor(doctor_id)

            self._check_date(date, doctor, exclude_id=None)

            fields: dict[str, Any] = {
                "patient_id": patient_id,
                "doctor_id": doctor_id,
                "date": date,
            }
            if appointment_id is not None:
                fields["appointment_id"] = appointment_id
            appointment = Appointment(**fields)
            self._store.add_appointment(appointment)
        except ClinicError as exc:
            logger.warning("Booking rejected: {}", exc)
            raise

        doctor.add_to_schedule(appointment.appointment_id)
        logger.info("Appointment booked: id={}", appointment.appointment_id)
        return appointment

    def set_appointment_date(self, appointment_id: str, new_date: dt.datetime) -> Appointment:
        """Move an appointment without touching its status."""
        appointment = self._store.get_appointment(appointment_id)
        updated = self._move(appointment, new_date)
        self._store.save_appointment(updated)
        logger.info("Appointment date changed: id={}", appointment_id)
        return updated

    def reschedule_appointment(self, appointment_id: str, new_date: dt.datetime) -> Appointment:
        """Move an appointment and mark it ``Rescheduled``.

        If the move is rejected, neither date nor status changes.
        """
        appointment = self._store.get_appointment(appointment_id)
        self._check_transition(appointment, AppointmentStatus.RESCHEDULED)
        updated = self._move(appointment, new_date).with_status(AppointmentStatus.RESCHEDULED)
        self._store.save_appointment(updated)
        logger.info("Appointment rescheduled: id={}", appointment_id)
        return updated

    def cancel_appointment(self, appointment_id: str) -> Appointment:
        """Mark an appointment ``Cancelled``. It stays on the doctor's schedule."""
        appointment = self._store.get_appointment(appointment_id)
        self._check_transition(appointment, AppointmentStatus.CANCELLED)
        updated = appointment.with_status(AppointmentStatus.CANCELLED)
        self._store.save_appointment(updated)
        logger.info("Appointment cancelled: id={}", appointment_id)
        return updated

    def doctor_schedule(self, doctor_id: str) -> list[Appointment]:
        doctor = self._store.get_doctor(doctor_id)
        return self._store.appointments_for(doctor.schedule)

    def patient_appointments(self, patient_id: str) -> list[Appointment]:
        self._store.get_patient(patient_id)
        return [a for a in self._store.list_appointments() if a.patient_id == patient_id]

    def _move(self, appointment: Appointment, new_date: dt.datetime) -> Appointment:
        doctor = self._store.get_doctor(appointment.doctor_id)
        try:
            self._check_date(new_date, doctor, exclude_id=appointment.appointment_id)
        except ClinicError as exc:
            logger.warning(
                "Date change rejected: id={}, reason={}", appointment.appointment_id, exc
            )
            raise
        return appointment.with_date(new_date)

    def _check_transition(self, appointment: Appointment, target: AppointmentStatus) -> None:
        try:
            rules.check_transition(
                appointment.status, target, strict=self._config.strict_status_transitions
            )
        except ClinicError as exc:
            logger.warning(
                "Status change rejected: id={}, reason={}", appointment.appointment_id, exc
            )
            raise

    def _check_date(self, new_date: dt.datetime, doctor: Doctor, exclude_id: str | None) -> None:
        if not isinstance(new_date, dt.datetime):
            raise ValidationError("Appointment date must be a date and time.", field="date")
        rules.validate_appointment_date(
            new_date,
            now=self._clock(),
            closed_weekdays=self._config.closed_weekdays,
        )
        rules.ensure_no_conflict(
            new_date,
            self._store.appointments_for(doctor.schedule),
            doctor_name=doctor.name,
            exclude_id=exclude_id,
            window=self._config.conflict_window,
            include_cancelled=self._config.cancelled_blocks_slot,
        )
