import datetime as dt

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClinicConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CLINIC_", env_file=".env", extra="ignore")

    conflict_window_minutes: int = Field(default=60, gt=0)
    # datetime.weekday() numbers: Monday is 0, Sunday is 6
    closed_weekdays: frozenset[int] = frozenset({5, 6})
    minor_age: int = Field(default=18, ge=0)
    cancelled_blocks_slot: bool = True
    strict_status_transitions: bool = False
    log_level: str = "INFO"

    @field_validator("closed_weekdays")
    @classmethod
    def _weekdays_in_range(cls, value: frozenset[int]) -> frozenset[int]:
        invalid = sorted(day for day in value if not 0 <= day <= 6)
        if invalid:
            raise ValueError(f"weekday numbers must be between 0 and 6, got {invalid}")
        return value

    @property
    def conflict_window(self) -> dt.timedelta:
        return dt.timedelta(minutes=self.conflict_window_minutes)
