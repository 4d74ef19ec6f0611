import datetime as dt

import pytest

from clinic.config import ClinicConfig
from clinic.domain.models import Doctor, Patient
from clinic.scheduling.clock import FrozenClock
from clinic.scheduling.service import ClinicService
from clinic.scheduling.store import InMemoryClinicStore

# Wednesday 18 March 2026, 09:00
NOW = dt.datetime(2026, 3, 18, 9, 0)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def config() -> ClinicConfig:
    return ClinicConfig(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def store() -> InMemoryClinicStore:
    return InMemoryClinicStore()


@pytest.fixture
def service(store: InMemoryClinicStore, config: ClinicConfig, clock: FrozenClock) -> ClinicService:
    return ClinicService(store, config=config, clock=clock)


@pytest.fixture
def patient(service: ClinicService) -> Patient:
    return service.register_patient("Alice Johnson", dt.date(1995, 8, 20), patient_id="p-alice")


@pytest.fixture
def doctor(service: ClinicService) -> Doctor:
    return service.register_doctor("Dr. Sarah Lee", "Cardiology", doctor_id="d-lee")
