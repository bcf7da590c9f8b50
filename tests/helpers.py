"""Dates and record factories shared by the test modules."""

from datetime import date, datetime

from barbershop.models import Appointment

MONDAY = date(2026, 1, 5)
TUESDAY = date(2026, 1, 6)
NOW = datetime(2026, 1, 1, 12, 0, 0)


def make_appointment(**overrides) -> Appointment:
    values = {
        "id": "APT-00000001",
        "shop_id": "S1",
        "client_id": "C1",
        "staff_id": None,
        "date": MONDAY,
        "time": "09:00",
        "status": "confirmed",
    }
    values.update(overrides)
    return Appointment(**values)
