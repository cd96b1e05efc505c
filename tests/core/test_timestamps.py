"""
Tests for timestamp conversion utilities.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.timestamps import (
    UNIX_EPOCH,
    datetime_to_ms,
    format_created_annotation,
    ms_to_datetime,
    utc_now,
)


class TestMillisecondTimestamps:
    """Tests for epoch-millisecond conversion (OneTab createDate)."""

    def test_ms_to_datetime_valid(self):
        """Whole seconds and the millisecond remainder are both kept."""
        dt = ms_to_datetime(1760074389851)

        assert dt == datetime(2025, 10, 10, 5, 33, 9, 851000, tzinfo=timezone.utc)
        assert dt.tzinfo == timezone.utc

    def test_ms_to_datetime_zero_is_epoch(self):
        assert ms_to_datetime(0) == UNIX_EPOCH

    def test_ms_to_datetime_negative_before_epoch(self):
        assert ms_to_datetime(-1500) == UNIX_EPOCH - timedelta(milliseconds=1500)

    def test_ms_to_datetime_overflow_falls_back_to_epoch(self):
        """Out-of-range values do not raise."""
        assert ms_to_datetime(10**20) == UNIX_EPOCH

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_ms_to_datetime_non_finite_falls_back_to_epoch(self, value):
        assert ms_to_datetime(value) == UNIX_EPOCH

    def test_ms_to_datetime_float(self):
        assert ms_to_datetime(1500.0) == UNIX_EPOCH + timedelta(milliseconds=1500)

    def test_round_trip(self):
        assert datetime_to_ms(ms_to_datetime(1760074389851)) == 1760074389851

    def test_naive_datetime_treated_as_utc(self):
        naive = datetime(2020, 1, 1)
        assert datetime_to_ms(naive) == 1577836800000

    def test_aware_non_utc_datetime(self):
        plus_two = timezone(timedelta(hours=2))
        assert datetime_to_ms(datetime(2020, 1, 1, 2, tzinfo=plus_two)) == 1577836800000


class TestUtilities:

    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo == timezone.utc

    def test_created_annotation_pm(self):
        dt = datetime(2025, 3, 20, 22, 8, 46, tzinfo=timezone.utc)
        assert format_created_annotation(dt) == "3/20/2025, 10:08:46 PM"

    def test_created_annotation_midnight(self):
        dt = datetime(2024, 12, 1, 0, 5, 0, tzinfo=timezone.utc)
        assert format_created_annotation(dt) == "12/1/2024, 12:05:00 AM"
