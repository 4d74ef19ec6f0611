import datetime as dt
from collections.abc import Collection, Iterable

from clinic.config import ClinicConfig
from clinic.domain.exceptions import ConflictError, InvalidStatusTransitionError, ValidationError
from clinic.domain.models import ALLOWED_TRANSITIONS, Appointment, AppointmentStatus

# Defaults follow the ClinicConfig field defaults
DEFAULT_CLOSED_WEEKDAYS: frozenset[int] = ClinicConfig.model_fields["closed_weekdays"].default
DEFAULT_CONFLICT_WINDOW = dt.timedelta(
    minutes=ClinicConfig.model_fields["conflict_window_minutes"].default
)


def validate_appointment_date(
    new_date: dt.datetime,
    *,
    now: dt.datetime,
    closed_weekdays: Collection[int] = DEFAULT_CLOSED_WEEKDAYS,
) -> None:
    """Check the argument-only date rules, in order.

    Raises:
        ValidationError: If ``new_date`` is before ``now`` or falls on a closed weekday.
    """
    if new_date < now:
        raise ValidationError("Appointment date must be in the future.", field="date")
    if new_date.weekday() in closed_weekdays:
        raise ValidationError("Appointments are not available on weekends.", field="date")


def find_conflict(
    new_date: dt.datetime,
    existing: Iterable[Appointment],
    *,
    exclude_id: str | None = None,
    window: dt.timedelta = DEFAULT_CONFLICT_WINDOW,
    include_cancelled: bool = True,
) -> Appointment | None:
    """Return the first appointment closer than ``window`` to ``new_date``.

    ``exclude_id`` skips the appointment being moved so it never conflicts
    with itself. The window is symmetric and the boundary is open: an
    appointment exactly ``window`` away does not conflict.
    """
    for appointment in existing:
        if appointment.appointment_id == exclude_id:
            continue
        if appointment.is_cancelled and not include_cancelled:
            continue
        if abs(appointment.date - new_date) < window:
            return appointment
    return None


def ensure_no_conflict(
    new_date: dt.datetime,
    existing: Iterable[Appointment],
    *,
    doctor_name: str,
    exclude_id: str | None = None,
    window: dt.timedelta = DEFAULT_CONFLICT_WINDOW,
    include_cancelled: bool = True,
) -> None:
    """Raise ``ConflictError`` if ``find_conflict`` finds anything."""
    clash = find_conflict(
        new_date,
        existing,
        exclude_id=exclude_id,
        window=window,
        include_cancelled=include_cancelled,
    )
    if clash is not None:
        raise ConflictError(
            doctor_name=doctor_name,
            requested=new_date,
            conflicting_appointment_id=clash.appointment_id,
        )


def check_transition(
    current: AppointmentStatus, target: AppointmentStatus, *, strict: bool = False
) -> None:
    """Reject a status change that is not in ``ALLOWED_TRANSITIONS``.

    Any transition is accepted unless ``strict`` is set.
    """
    if strict and target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(current.value, target.value)
