import datetime as dt
import sys
from decimal import Decimal

from loguru import logger

from clinic.config import ClinicConfig
from clinic.domain.exceptions import ClinicError
from clinic.domain.models import BillingItem
from clinic.reporting import (
    describe_appointment,
    describe_doctor,
    describe_medical_summary,
    describe_patient,
    describe_workload,
)
from clinic.scheduling.factory import build_clinic_service
from clinic.scheduling.service import ClinicService


def next_week_slot(
    now: dt.datetime, closed_weekdays: frozenset[int], hour: int = 10
) -> dt.datetime:
    """10:00 one week from ``now``, pushed forward past any closed days."""
    slot = dt.datetime.combine(now.date() + dt.timedelta(days=7), dt.time(hour))
    for _ in range(7):
        if slot.weekday() not in closed_weekdays:
            break
        slot += dt.timedelta(days=1)
    return slot


def run_demo(service: ClinicService) -> None:
    print("=== Clinic Model Demo ===\n")

    try:
        now = service.now()
        config = service.config

        alice = service.register_patient("Alice Johnson", dt.date(1995, 8, 20))
        bobby = service.register_patient("Bobby Smith", dt.date(2018, 3, 10))
        doctor = service.register_doctor("Dr. Sarah Lee", "Cardiology")

        service.add_medical_entry(alice.patient_id, "Allergy to penicillin")
        service.add_medical_entry(alice.patient_id, "Hypertension diagnosed")

        appointment = service.book_appointment(
            next_week_slot(now, config.closed_weekdays),
            alice.patient_id,
            doctor.doctor_id,
        )

        print(describe_patient(alice, now, config.minor_age))
        print(describe_medical_summary(alice))
        print(describe_doctor(doctor))
        print(describe_appointment(appointment))
        print(describe_workload(doctor) + "\n")

        print("=== Billing Demo ===")
        print(BillingItem(description="Blood Test", amount=Decimal("150.00")))
        print(BillingItem(description="ECG", amount=Decimal("80.50")))

        print("\n" + describe_patient(bobby, now, config.minor_age))
    except ClinicError as exc:
        print(f"Error: {exc}")


def main() -> None:
    config = ClinicConfig()
    logger.remove()
    logger.add(sys.stderr, level=config.log_level)

    run_demo(build_clinic_service(config))


if __name__ == "__main__":
    main()
