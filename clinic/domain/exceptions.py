import datetime as dt


class ClinicError(Exception):
    """Base exception for all clinic model errors."""


class ValidationError(ClinicError):
    """Raised when an input violates a precondition."""

    def __init__(self, reason: str, field: str | None = None) -> None:
        self.reason = reason
        self.field = field
        super().__init__(reason)


class UnknownReferenceError(ValidationError):
    """Raised when an identifier does not name a registered record."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"Unknown {kind}: {identifier}", field=f"{kind}_id")


class InvalidStatusTransitionError(ValidationError):
    """Raised when strict status transitions are enabled and a move is not allowed."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change appointment status from {current} to {target}.", field="status"
        )


class ConflictError(ClinicError):
    """Raised when a date would overlap another appointment in a doctor's schedule."""

    def __init__(
        self,
        doctor_name: str,
        requested: dt.datetime,
        conflicting_appointment_id: str | None = None,
    ) -> None:
        self.doctor_name = doctor_name
        self.requested = requested
        self.conflicting_appointment_id = conflicting_appointment_id
        super().__init__(f"Doctor {doctor_name} already has an appointment at that time.")
