"""Tests for common.datetime module."""

from datetime import datetime, timezone

import pytest

from common.datetime import KST, as_kst, format_kst, now_kst, parse_datetime


class TestParseDatetime:
    def test_none_returns_none(self) -> None:
        assert parse_datetime(None) is None

    def test_empty_string_returns_none(self) -> None:
        assert parse_datetime("   ") is None

    def test_datetime_passthrough(self) -> None:
        dt = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert parse_datetime(dt) is dt

    def test_iso_string_parsing(self) -> None:
        result = parse_datetime("2024-01-01T12:00:00+00:00")
        assert result == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_iso_string_with_z_suffix(self) -> None:
        result = parse_datetime("2024-01-01T12:00:00Z")
        assert result == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_naive_value_is_seoul_time(self) -> None:
        result = parse_datetime("2024-12-15 14:30")
        assert result == datetime(2024, 12, 15, 14, 30, tzinfo=KST)
        assert result.utcoffset().total_seconds() == 9 * 3600

    def test_falls_back_to_dateutil(self) -> None:
        result = parse_datetime("Dec 15 2024 2:30 PM")
        assert result == datetime(2024, 12, 15, 14, 30, tzinfo=KST)

    def test_garbage_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_datetime("not a date")


class TestFormatKst:
    def test_none_gives_empty_string(self) -> None:
        assert format_kst(None, "%Y-%m-%d") == ""

    def test_converts_to_seoul(self) -> None:
        dt = datetime(2024, 12, 15, 5, 30, tzinfo=timezone.utc)
        assert format_kst(dt, "%Y-%m-%d %H:%M") == "2024-12-15 14:30"


class TestAsKst:
    def test_naive_value_is_seoul_time(self) -> None:
        assert as_kst(datetime(2024, 12, 15, 14, 30)) == datetime(2024, 12, 15, 14, 30, tzinfo=KST)

    def test_aware_value_is_converted(self) -> None:
        result = as_kst(datetime(2024, 12, 15, 5, 30, tzinfo=timezone.utc))
        assert (result.hour, result.tzinfo) == (14, KST)


class TestNowKst:
    def test_is_timezone_aware(self) -> None:
        assert now_kst().tzinfo is KST
