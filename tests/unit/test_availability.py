"""Unit Tests - Availability slot generator."""

import pytest

from petshop.core.availability import format_hhmm, generate_time_slots, parse_hhmm
from petshop.core.errors import InvalidInputError


class TestGenerateTimeSlots:
    """Tests for generate_time_slots."""

    def test_half_hour_window(self) -> None:
        assert generate_time_slots("09:00", "10:00", 30) == ["09:00", "09:30"]

    def test_end_is_exclusive(self) -> None:
        slots = generate_time_slots("09:00", "18:00", 30)

        assert slots[0] == "09:00"
        assert slots[-1] == "17:30"
        assert len(slots) == 18

    def test_interval_not_dividing_window(self) -> None:
        assert generate_time_slots("09:00", "10:00", 45) == ["09:00", "09:45"]

    def test_start_equal_end_returns_empty(self) -> None:
        assert generate_time_slots("10:00", "10:00", 30) == []

    def test_inverted_window_returns_empty(self) -> None:
        assert generate_time_slots("10:00", "09:00", 30) == []

    @pytest.mark.parametrize("interval", [0, -15])
    def test_non_positive_interval_returns_empty(self, interval: int) -> None:
        assert generate_time_slots("09:00", "10:00", interval) == []

    @pytest.mark.parametrize("value", ["9h", "25:00", "10:60", "", "10:00:00"])
    def test_malformed_time_raises(self, value: str) -> None:
        with pytest.raises(InvalidInputError):
            generate_time_slots(value, "18:00", 30)


class TestTimeHelpers:
    def test_parse_and_format(self) -> None:
        assert parse_hhmm("08:15") == 495
        assert format_hhmm(495) == "08:15"
        assert format_hhmm(0) == "00:00"
