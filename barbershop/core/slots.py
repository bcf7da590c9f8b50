# barbershop/core/slots.py

"""Shop availability resolver.

Turns a shop's working days, opening hours and optional custom slot list into
the ordered time-of-day strings that can be booked on a given date. Times are
``HH:MM`` (24h, zero padded) and are handled as integer minutes since
midnight so that hour rollover stays exact.
"""

from datetime import date as Date
from typing import Iterable, List, Union

from ..data import SLOT_MINUTES
from ..errors import InvalidConfiguration, InvalidRequest


def to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def parse_date(value: Union[Date, str]) -> Date:
    if isinstance(value, Date):
        return value
    try:
        return Date.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidRequest(f"Invalid date: {value!r}")


def slot_time(slot) -> str:
    return slot["time"] if isinstance(slot, dict) else slot.time


def sort_time_slots(slots: Iterable) -> list:
    """Chronological order, the order custom slots are saved in."""
    return sorted(slots, key=lambda slot: to_minutes(slot_time(slot)))


def is_working_day(shop, on_date: Union[Date, str]) -> bool:
    return parse_date(on_date).weekday() in (shop.working_days or [])


def grid_slots(opening_time: str, closing_time: str, step: int = SLOT_MINUTES) -> List[str]:
    """Slots from opening (inclusive) every ``step`` minutes, strictly before closing."""
    current = to_minutes(opening_time)
    end = to_minutes(closing_time)

    times = []
    while current < end:
        times.append(format_minutes(current))
        current += step
    return times


def resolve_slots(shop, on_date: Union[Date, str]) -> List[str]:
    """Bookable times for ``shop`` on ``on_date``; empty when the shop is closed.

    A non-empty ``available_time_slots`` list is authoritative and is
    returned in stored order. Otherwise the hourly grid between
    ``opening_time`` and ``closing_time`` is generated.
    """
    if not is_working_day(shop, on_date):
        return []

    if shop.available_time_slots:
        return [slot_time(slot) for slot in shop.available_time_slots]

    return grid_slots(shop.opening_time, shop.closing_time)


def check_schedule(working_days, opening_time: str, closing_time: str, time_slots=()) -> list:
    """Validate a shop schedule before it is saved; returns the custom slots
    sorted chronologically."""
    if not working_days:
        raise InvalidConfiguration("working_days must contain at least one day")
    for day in working_days:
        if not (0 <= day <= 6):
            raise InvalidConfiguration("working_days must be integers between 0 and 6")
    if len(working_days) != len(set(working_days)):
        raise InvalidConfiguration("working_days cannot contain duplicates")

    if to_minutes(opening_time) >= to_minutes(closing_time):
        raise InvalidConfiguration("opening_time must be earlier than closing_time")

    slots = sort_time_slots(time_slots)
    times = [slot_time(slot) for slot in slots]
    if len(times) != len(set(times)):
        raise InvalidConfiguration("available_time_slots cannot repeat a time")
    for slot in slots:
        duration = slot["duration_minutes"] if isinstance(slot, dict) else slot.duration_minutes
        if duration <= 0:
            raise InvalidConfiguration("slot duration must be a positive number of minutes")
    return slots
