import datetime as dt

from loguru import logger

from clinic.config import ClinicConfig
from clinic.scheduling.ports import Clock
from clinic.scheduling.service import ClinicService
from clinic.scheduling.store import InMemoryClinicStore


def build_clinic_service(config: ClinicConfig, clock: Clock = dt.datetime.now) -> ClinicService:
    """Build a clinic service backed by a fresh in-memory store."""
    logger.info(
        "Building clinic service: conflict_window={}min, closed_weekdays={}",
        config.conflict_window_minutes,
        sorted(config.closed_weekdays),
    )
    return ClinicService(InMemoryClinicStore(), config=config, clock=clock)
