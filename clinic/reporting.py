import datetime as dt

from clinic.domain.models import Appointment, Doctor, Patient


def format_appointment_time(value: dt.datetime) -> str:
    """Render ``datetime(2026, 3, 23, 14, 30)`` as ``2026-03-23 02:30 PM``."""
    return value.strftime("%Y-%m-%d %I:%M %p")


def describe_patient(patient: Patient, now: dt.datetime, minor_age: int = 18) -> str:
    return (
        f"Patient: {patient.name}, Age: {patient.age(now)}, "
        f"Minor: {patient.is_minor(now, minor_age)}"
    )


def describe_medical_summary(patient: Patient) -> str:
    return f"Medical Summary: {patient.full_medical_summary}"


def describe_doctor(doctor: Doctor) -> str:
    return f"Doctor: {doctor.name} ({doctor.specialization})"


def describe_appointment(appointment: Appointment) -> str:
    return (
        f"Appointment: {format_appointment_time(appointment.date)} "
        f"- Status: {appointment.status.value}"
    )


def describe_workload(doctor: Doctor) -> str:
    return f"Doctor has {doctor.total_appointments} appointment(s)"
