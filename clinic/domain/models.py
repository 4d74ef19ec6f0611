import datetime as dt
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from clinic.domain.exceptions import ValidationError

NO_HISTORY_SUMMARY = "No medical history recorded"
CENT = Decimal("0.01")


def new_id() -> str:
    return uuid4().hex


def _require_text(value: Any, reason: str, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(reason, field=field)
    return value


def as_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Translate pydantic's type or parsing failure into the clinic error type."""
    first = exc.errors()[0]
    field = str(first["loc"][0]) if first["loc"] else None
    reason = f"Invalid {field}: {first['msg']}" if field else first["msg"]
    return ValidationError(reason, field=field)


class AppointmentStatus(str, Enum):
    """Lifecycle states of an appointment."""

    SCHEDULED = "Scheduled"
    RESCHEDULED = "Rescheduled"
    CANCELLED = "Cancelled"


# Informal lifecycle. Only consulted when strict transitions are switched on.
ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {AppointmentStatus.RESCHEDULED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.RESCHEDULED: frozenset(
        {AppointmentStatus.RESCHEDULED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.CANCELLED: frozenset(),
}


class MedicalEntry(BaseModel):
    """A single dated line in a patient's medical history."""

    model_config = ConfigDict(frozen=True)

    recorded_on: dt.date
    text: str

    @field_validator("text", mode="before")
    @classmethod
    def _text_not_blank(cls, value: Any) -> str:
        return _require_text(value, "Medical entry cannot be empty.", "text").strip()

    def __str__(self) -> str:
        return f"{self.recorded_on.isoformat()}: {self.text}"


class Patient(BaseModel):
    """A patient record.

    Name and date of birth are fixed once the record exists. The only
    mutation is appending to the medical history. Age-related values are
    derived from a caller-supplied ``now`` on every call, never cached.

    Build instances with ``Patient.create``. The date of birth can only be
    checked against a reference time, so validation without a ``now`` in
    the context is rejected.
    """

    model_config = ConfigDict(validate_assignment=True)

    patient_id: str = Field(default_factory=new_id, frozen=True)
    name: str = Field(frozen=True)
    date_of_birth: dt.date = Field(frozen=True)

    _entries: list[MedicalEntry] = PrivateAttr(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_blank(cls, value: Any) -> str:
        return _require_text(value, "Patient name cannot be empty.", "name")

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _drop_time_of_day(cls, value: Any) -> Any:
        if isinstance(value, dt.datetime):
            return value.date()
        return value

    @model_validator(mode="after")
    def _born_by_now(self, info: ValidationInfo) -> "Patient":
        now = (info.context or {}).get("now")
        if not isinstance(now, dt.datetime):
            raise ValidationError(
                "A reference time is required to register a patient; use Patient.create.",
                field="date_of_birth",
            )
        if self.date_of_birth > now.date():
            raise ValidationError("Date of birth cannot be in the future.", field="date_of_birth")
        return self

    @classmethod
    def create(
        cls,
        name: str,
        date_of_birth: dt.date,
        *,
        now: dt.datetime,
        patient_id: str | None = None,
    ) -> "Patient":
        """Build a patient, rejecting a date of birth later than ``now``.

        Raises:
            ValidationError: If the name is blank, the date of birth cannot be
                parsed or is in the future.
        """
        fields: dict[str, Any] = {"name": name, "date_of_birth": date_of_birth}
        if patient_id is not None:
            fields["patient_id"] = patient_id
        try:
            return cls.model_validate(fields, context={"now": now})
        except PydanticValidationError as exc:
            raise as_validation_error(exc) from exc

    def age(self, now: dt.datetime) -> int:
        """Whole years elapsed, counted as 365-day blocks."""
        return (now.date() - self.date_of_birth).days // 365

    def is_minor(self, now: dt.datetime, minor_age: int = 18) -> bool:
        return self.age(now) < minor_age

    @property
    def medical_entries(self) -> tuple[MedicalEntry, ...]:
        return tuple(self._entries)

    @property
    def medical_history(self) -> tuple[str, ...]:
        return tuple(str(entry) for entry in self._entries)

    @property
    def full_medical_summary(self) -> str:
        if not self._entries:
            return NO_HISTORY_SUMMARY
        return "; ".join(self.medical_history)

    def add_medical_entry(self, text: str, *, now: dt.datetime) -> MedicalEntry:
        """Append a history line stamped with ``now``'s date.

        Raises:
            ValidationError: If ``text`` is empty or whitespace. History is left untouched.
        """
        entry = MedicalEntry(recorded_on=now.date(), text=text)
        self._entries.append(entry)
        return entry


class Doctor(BaseModel):
    """A doctor and the identifiers of the appointments booked with them.

    The schedule is a lookup index in booking order. Appointments themselves
    live in the store; cancelling one does not remove it from here.
    """

    model_config = ConfigDict(validate_assignment=True)

    doctor_id: str = Field(default_factory=new_id, frozen=True)
    name: str
    specialization: str

    _schedule: list[str] = PrivateAttr(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_blank(cls, value: Any) -> str:
        return _require_text(value, "Doctor name cannot be empty.", "name")

    @field_validator("specialization", mode="before")
    @classmethod
    def _specialization_not_blank(cls, value: Any) -> str:
        return _require_text(value, "Doctor specialization cannot be empty.", "specialization")

    @property
    def schedule(self) -> tuple[str, ...]:
        return tuple(self._schedule)

    @property
    def total_appointments(self) -> int:
        return len(self._schedule)

    def add_to_schedule(self, appointment_id: str) -> None:
        if appointment_id in self._schedule:
            raise ValidationError(
                f"Appointment {appointment_id} is already on this schedule.",
                field="appointment_id",
            )
        self._schedule.append(appointment_id)


class Appointment(BaseModel):
    """A booked visit linking a patient and a doctor by identifier.

    Instances are immutable. Date and status changes go through the
    scheduling service, which stores a new version under the same id.
    """

    model_config = ConfigDict(frozen=True)

    appointment_id: str = Field(default_factory=new_id)
    patient_id: str
    doctor_id: str
    date: dt.datetime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED

    @field_validator("patient_id", mode="before")
    @classmethod
    def _patient_present(cls, value: Any) -> str:
        return _require_text(value, "Appointment requires a patient.", "patient_id")

    @field_validator("doctor_id", mode="before")
    @classmethod
    def _doctor_present(cls, value: Any) -> str:
        return _require_text(value, "Appointment requires a doctor.", "doctor_id")

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED

    def with_date(self, date: dt.datetime) -> "Appointment":
        return self.model_copy(update={"date": date})

    def with_status(self, status: AppointmentStatus) -> "Appointment":
        return self.model_copy(update={"status": status})


class BillingItem(BaseModel):
    """A billable line. Both fields are re-validated on every assignment."""

    model_config = ConfigDict(validate_assignment=True)

    description: str
    amount: Decimal

    @field_validator("description", mode="before")
    @classmethod
    def _description_not_blank(cls, value: Any) -> str:
        return _require_text(value, "Description cannot be empty.", "description")

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_positive(cls, value: Any) -> Decimal:
        if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
            raise ValidationError("Amount must be a number.", field="amount")
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError("Amount must be a number.", field="amount") from None
        if not amount.is_finite():
            raise ValidationError("Amount must be a finite number.", field="amount")
        if amount <= 0:
            raise ValidationError("Amount must be positive.", field="amount")
        return amount

    def __str__(self) -> str:
        # Midpoints round away from zero: 0.125 renders as 0.13
        shown = self.amount.quantize(CENT, rounding=ROUND_HALF_UP)
        return f"{self.description}: ${shown}"


def billing_total(items: Iterable[BillingItem]) -> Decimal:
    return sum((item.amount for item in items), Decimal("0"))
