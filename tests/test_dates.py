"""Tests for calendar helpers."""
from datetime import date, datetime

import pytest

from dates import (
    day_number,
    day_of_week,
    day_one_from_measurements,
    enumerate_month,
    parse_date,
)
from errors import InvalidInput


class TestDayNumber:
    def test_anchor_is_day_one(self):
        anchor = date(2024, 3, 4)
        assert day_number(anchor, anchor) == 1

    def test_across_month_and_year_boundaries(self):
        anchor = date(2023, 12, 30)
        assert day_number(anchor, date(2023, 12, 31)) == 2
        assert day_number(anchor, date(2024, 1, 1)) == 3
        assert day_number(anchor, date(2024, 3, 1)) == 63  # 2024 is a leap year

    def test_strictly_increasing(self):
        anchor = date(2024, 1, 15)
        days = enumerate_month(2024, 1) + enumerate_month(2024, 2)
        numbers = [day_number(anchor, d) for d in days]
        assert all(a < b for a, b in zip(numbers, numbers[1:]))

    def test_before_anchor(self):
        assert day_number(date(2024, 3, 4), date(2024, 3, 3)) == 0


class TestDayOfWeek:
    def test_sunday_is_zero(self):
        assert day_of_week(date(2024, 3, 3)) == 0
        assert day_of_week(date(2024, 3, 4)) == 1
        assert day_of_week(date(2024, 3, 9)) == 6


class TestEnumerateMonth:
    def test_leap_february(self):
        days = enumerate_month(2024, 2)
        assert len(days) == 29
        assert days[0] == date(2024, 2, 1)
        assert days[-1] == date(2024, 2, 29)

    def test_december(self):
        days = enumerate_month(2023, 12)
        assert len(days) == 31
        assert len(set(days)) == 31

    @pytest.mark.parametrize("year,month", [(2024, 0), (2024, 13), (0, 5), (10000, 1), (2024, "3")])
    def test_out_of_range(self, year, month):
        with pytest.raises(InvalidInput):
            enumerate_month(year, month)


class TestParseDate:
    def test_accepts_string_date_and_datetime(self):
        assert parse_date("2024-03-04") == date(2024, 3, 4)
        assert parse_date(date(2024, 3, 4)) == date(2024, 3, 4)
        assert parse_date(datetime(2024, 3, 4, 23, 59)) == date(2024, 3, 4)

    def test_accepts_iso_timestamp_string(self):
        assert parse_date("2024-03-04T10:00:00Z") == date(2024, 3, 4)
        assert parse_date("2024-03-04T10:00:00+02:00") == date(2024, 3, 4)
        assert parse_date(" 2024-03-04 ") == date(2024, 3, 4)

    @pytest.mark.parametrize(
        "value",
        ["2024-13-01", "yesterday", "", "2024-03-04garbage", "2024-03-06zzz", 20240304, None],
    )
    def test_malformed(self, value):
        with pytest.raises(InvalidInput):
            parse_date(value)


class TestDayOneFromMeasurements:
    def test_earliest_wins_regardless_of_order(self):
        history = [
            {"date": "2024-03-10", "body_fat_percentage": 20.1},
            {"date": "2024-03-04", "body_fat_percentage": 21.0},
            {"date": "2024-04-01", "body_fat_percentage": 19.5},
        ]
        assert day_one_from_measurements(history) == date(2024, 3, 4)

    def test_empty_history(self):
        assert day_one_from_measurements([]) is None
        assert day_one_from_measurements(None) is None
