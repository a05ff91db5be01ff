"""Tests for duration parsing."""

import pytest

from shopcache import parse_duration


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_milliseconds(self) -> None:
        assert parse_duration("100ms") == 100
        assert parse_duration("0ms") == 0

    def test_seconds(self) -> None:
        assert parse_duration("1s") == 1000
        assert parse_duration("30s") == 30000

    def test_minutes(self) -> None:
        """Store lifetimes are usually given in minutes."""
        assert parse_duration("2m") == 120_000
        assert parse_duration("5m") == 300_000
        assert parse_duration("10m") == 600_000

    def test_hours_and_days(self) -> None:
        assert parse_duration("1h") == 3_600_000
        assert parse_duration("1d") == 86_400_000

    def test_integer_passthrough(self) -> None:
        assert parse_duration(1000) == 1000
        assert parse_duration(0) == 0

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert parse_duration(" 5m ") == 300_000

    def test_invalid_format(self) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration("invalid")

    def test_invalid_unit(self) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration("10x")

    def test_missing_number(self) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration("ms")

    def test_negative_integer(self) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(-1)

    def test_bool_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(True)
