# barbershop/core/availability.py

"""Availability queries used by the booking and edit forms."""

from datetime import date as Date
from typing import List, Optional, Sequence, Union

from .conflicts import is_free
from .slots import parse_date, resolve_slots


def available_slots(
    shop,
    appointments: Sequence,
    on_date: Union[Date, str],
    staff_id: Optional[str] = None,
    exempt_id: Optional[str] = None,
) -> List[str]:
    """Free times for one staff member, or for the unassigned bucket when
    ``staff_id`` is None.

    ``exempt_id`` is the appointment being edited; it never blocks its own slot.
    """
    on_date = parse_date(on_date)
    return [
        time
        for time in resolve_slots(shop, on_date)
        if is_free(appointments, shop.id, on_date, time, staff_id, exempt_id)
    ]


def available_slots_any_staff(
    shop,
    appointments: Sequence,
    on_date: Union[Date, str],
    exempt_id: Optional[str] = None,
) -> List[str]:
    """Times where at least one of the shop's staff members is free."""
    on_date = parse_date(on_date)
    if not shop.staff_ids:
        return available_slots(shop, appointments, on_date, exempt_id=exempt_id)

    return [
        time
        for time in resolve_slots(shop, on_date)
        if any(
            is_free(appointments, shop.id, on_date, time, staff_id, exempt_id)
            for staff_id in shop.staff_ids
        )
    ]
