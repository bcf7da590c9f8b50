"""Tests for the shop availability resolver."""

from datetime import timedelta

import pytest

from barbershop.core.slots import (
    check_schedule,
    format_minutes,
    is_working_day,
    resolve_slots,
    sort_time_slots,
    to_minutes,
)
from barbershop.errors import InvalidConfiguration, InvalidRequest
from barbershop.schemas import ShopSchedule

from tests.helpers import MONDAY, TUESDAY


class TestTimeHelpers:
    def test_to_minutes(self):
        assert to_minutes("00:00") == 0
        assert to_minutes("09:30") == 570
        assert to_minutes("23:59") == 1439

    def test_format_minutes_zero_pads(self):
        assert format_minutes(570) == "09:30"
        assert format_minutes(630) == "10:30"
        assert format_minutes(5) == "00:05"

    def test_sort_time_slots_is_chronological(self):
        slots = [
            {"time": "15:00", "duration_minutes": 60},
            {"time": "08:30", "duration_minutes": 30},
            {"time": "10:00", "duration_minutes": 45},
        ]
        assert [s["time"] for s in sort_time_slots(slots)] == ["08:30", "10:00", "15:00"]


class TestResolveSlots:
    """Slot grid for a shop and a date."""

    def test_hourly_grid_excludes_closing_time(self, shop):
        """09:00-12:00 yields three slots, closing time itself is not bookable."""
        shop.closing_time = "12:00"

        assert resolve_slots(shop, MONDAY) == ["09:00", "10:00", "11:00"]

    def test_grid_keeps_opening_minutes(self, shop):
        """Opening at 09:30 steps to 10:30, 11:30."""
        shop.opening_time = "09:30"
        shop.closing_time = "12:00"

        assert resolve_slots(shop, MONDAY) == ["09:30", "10:30", "11:30"]

    def test_closed_day_is_empty(self, shop):
        assert resolve_slots(shop, TUESDAY) == []

    def test_no_working_days_is_empty_every_day(self, shop):
        shop.working_days = []

        for offset in range(7):
            assert resolve_slots(shop, MONDAY + timedelta(days=offset)) == []

    def test_custom_slots_are_authoritative(self, shop):
        """Custom slots ignore opening/closing bounds and keep stored order."""
        shop.available_time_slots = [
            {"time": "15:00", "duration_minutes": 30},
            {"time": "08:00", "duration_minutes": 45},
        ]

        assert resolve_slots(shop, MONDAY) == ["15:00", "08:00"]

    def test_custom_slots_still_respect_working_days(self, shop):
        shop.available_time_slots = [{"time": "15:00", "duration_minutes": 30}]

        assert resolve_slots(shop, TUESDAY) == []

    def test_accepts_iso_date_string(self, shop):
        assert resolve_slots(shop, "2026-01-05") == ["09:00", "10:00"]

    def test_invalid_date_string_raises(self, shop):
        with pytest.raises(InvalidRequest):
            resolve_slots(shop, "2026-02-30")

    def test_working_day_check(self, shop):
        assert is_working_day(shop, MONDAY) is True
        assert is_working_day(shop, TUESDAY) is False


class TestWeekdayNames:
    def test_schedule_translates_day_names(self):
        """Day names are translated to 0=Mon .. 6=Sun at the request boundary."""
        schedule = ShopSchedule(
            working_days=["Lunes", "Miércoles", "Domingo"],
            opening_time="09:00",
            closing_time="11:00",
        )

        assert schedule.working_days == [0, 2, 6]

    def test_schedule_accepts_integers(self):
        schedule = ShopSchedule(working_days=[1, 4], opening_time="09:00", closing_time="11:00")

        assert schedule.working_days == [1, 4]

    def test_unknown_day_name_is_rejected(self):
        with pytest.raises(ValueError):
            ShopSchedule(working_days=["Funday"], opening_time="09:00", closing_time="11:00")


class TestCheckSchedule:
    """Validation applied when a shop saves its schedule."""

    def test_returns_slots_sorted(self):
        slots = check_schedule(
            [0, 1],
            "09:00",
            "18:00",
            [{"time": "12:00", "duration_minutes": 30}, {"time": "09:00", "duration_minutes": 60}],
        )

        assert [s["time"] for s in slots] == ["09:00", "12:00"]

    def test_requires_a_working_day(self):
        with pytest.raises(InvalidConfiguration):
            check_schedule([], "09:00", "18:00")

    def test_rejects_out_of_range_weekday(self):
        with pytest.raises(InvalidConfiguration):
            check_schedule([7], "09:00", "18:00")

    def test_rejects_duplicate_weekdays(self):
        with pytest.raises(InvalidConfiguration):
            check_schedule([0, 0], "09:00", "18:00")

    def test_opening_must_precede_closing(self):
        with pytest.raises(InvalidConfiguration):
            check_schedule([0], "18:00", "09:00")
        with pytest.raises(InvalidConfiguration):
            check_schedule([0], "09:00", "09:00")

    def test_rejects_repeated_slot_times(self):
        with pytest.raises(InvalidConfiguration):
            check_schedule(
                [0],
                "09:00",
                "18:00",
                [{"time": "10:00", "duration_minutes": 30}, {"time": "10:00", "duration_minutes": 60}],
            )

    def test_rejects_non_positive_duration(self):
        with pytest.raises(InvalidConfiguration):
            check_schedule([0], "09:00", "18:00", [{"time": "10:00", "duration_minutes": 0}])
