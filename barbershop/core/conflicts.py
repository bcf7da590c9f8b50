# barbershop/core/conflicts.py

"""Conflict checker for appointment slots."""

from datetime import date as Date
from typing import Iterable, List, Optional, Union

from .slots import parse_date

CANCELLED = "cancelled"


def find_conflicts(
    appointments: Iterable,
    shop_id: str,
    on_date: Union[Date, str],
    time: str,
    staff_id: Optional[str] = None,
    exclude_id: Optional[str] = None,
) -> List:
    """Non-cancelled appointments holding ``time`` at ``shop_id`` on ``on_date``.

    With a ``staff_id`` only that staff member's bookings count, so unassigned
    bookings are ignored. Without one every booking at the slot counts,
    assigned or not.
    """
    on_date = parse_date(on_date)
    return [
        appt
        for appt in appointments
        if appt.shop_id == shop_id
        and appt.date == on_date
        and appt.time == time
        and appt.status != CANCELLED
        and (staff_id is None or appt.staff_id == staff_id)
        and (exclude_id is None or appt.id != exclude_id)
    ]


def is_free(
    appointments: Iterable,
    shop_id: str,
    on_date: Union[Date, str],
    time: str,
    staff_id: Optional[str] = None,
    exclude_id: Optional[str] = None,
) -> bool:
    return not find_conflicts(appointments, shop_id, on_date, time, staff_id, exclude_id)
