"""Tests for recurrence matching and time-window checks."""

from datetime import date, datetime, timedelta

import pytest

from use_cases.scheduling.domain.models import Recurrence, TimeWindow
from use_cases.scheduling.domain.policies import is_within, matches_date, sunday_based_weekday


def _dow(d: date) -> int:
    return sunday_based_weekday(datetime(d.year, d.month, d.day))


def _matches(recurrence: Recurrence, d: date) -> bool:
    return matches_date(recurrence, _dow(d), d)


class TestWeekday:
    def test_sunday_is_zero(self):
        assert sunday_based_weekday(datetime(2026, 2, 1, 10, 0)) == 0

    def test_monday_is_one(self):
        assert sunday_based_weekday(datetime(2026, 2, 2, 10, 0)) == 1

    def test_saturday_is_six(self):
        assert sunday_based_weekday(datetime(2026, 1, 31, 10, 0)) == 6


class TestMatchesDate:
    def test_bounds_are_inclusive(self):
        rule = Recurrence(type="daily", start_date=date(2026, 1, 30), end_date=date(2026, 2, 28))

        assert not _matches(rule, date(2026, 1, 29))
        assert _matches(rule, date(2026, 1, 30))
        assert _matches(rule, date(2026, 2, 28))
        assert not _matches(rule, date(2026, 3, 1))

    def test_open_ended(self):
        rule = Recurrence(type="daily", start_date=date(2026, 1, 30))

        assert _matches(rule, date(2030, 6, 1))

    def test_weekly_weekdays_only(self):
        rule = Recurrence(type="weekly", days_of_week=[1, 2, 3, 4, 5], start_date=date(2026, 1, 30))

        for offset in range(14):
            d = date(2026, 2, 1) + timedelta(days=offset)
            assert _matches(rule, d) == (d.weekday() < 5), d

    def test_weekly_respects_start(self):
        rule = Recurrence(type="weekly", days_of_week=[1], start_date=date(2026, 2, 3))

        # Monday before the start date
        assert not _matches(rule, date(2026, 2, 2))
        assert _matches(rule, date(2026, 2, 9))

    def test_biweekly_matches_every_listed_week(self):
        rule = Recurrence(type="biweekly", days_of_week=[1], start_date=date(2026, 1, 30))

        assert _matches(rule, date(2026, 2, 2))
        assert _matches(rule, date(2026, 2, 9))
        assert not _matches(rule, date(2026, 2, 10))

    def test_once_matches_start_date_only(self):
        rule = Recurrence(type="once", start_date=date(2026, 2, 10))

        assert _matches(rule, date(2026, 2, 10))
        assert not _matches(rule, date(2026, 2, 11))

    def test_monthly_never_matches(self):
        rule = Recurrence(type="monthly", start_date=date(2026, 1, 30))

        assert not _matches(rule, date(2026, 1, 30))
        assert not _matches(rule, date(2026, 3, 30))

    def test_unrecognized_type_never_matches(self):
        rule = Recurrence.model_construct(type="yearly", days_of_week=None, start_date=date(2026, 1, 30), end_date=None)

        assert not _matches(rule, date(2026, 1, 30))


class TestIsWithin:
    @pytest.fixture
    def office(self):
        return [TimeWindow(start="09:00", end="17:00")]

    @pytest.mark.parametrize("moment,expected", [
        ("08:59", False),
        ("09:00", True),
        ("12:34", True),
        ("16:59", True),
        ("17:00", False),
        ("17:01", False),
    ])
    def test_half_open(self, office, moment, expected):
        assert is_within(moment, office) is expected

    def test_any_window(self):
        split = [TimeWindow(start="08:00", end="12:00"), TimeWindow(start="13:00", end="17:00")]

        assert is_within("08:30", split)
        assert not is_within("12:30", split)
        assert is_within("13:00", split)

    def test_empty(self):
        assert not is_within("10:00", [])
