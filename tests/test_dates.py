"""
tests/test_dates.py — Tests for instant parsing and day arithmetic.

Tests cover:
- Date-only input as local midnight
- Day arithmetic across daylight-saving changes
"""

import time
from datetime import date

import pytest

from schedule_engine import generate_schedule
from utils.dates import add_days, to_iso, to_instant, local_date, days_between


@pytest.fixture
def sydney_time(monkeypatch):
    """Local time in a zone with DST (AEDT +11:00 until 7 April 2024, then AEST +10:00)."""
    if not hasattr(time, 'tzset'):
        pytest.skip('time.tzset is not available on this platform')
    monkeypatch.setenv('TZ', 'Australia/Sydney')
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestParsing:

    def test_date_only_is_local_midnight(self, sydney_time):
        assert to_iso('2024-03-01') == '2024-03-01T00:00:00+11:00'

    def test_z_suffix(self):
        assert to_instant('2024-03-01T10:00:00Z').isoformat() == '2024-03-01T10:00:00+00:00'


class TestAddDays:

    def test_local_midnight_across_dst_end(self, sydney_time):
        assert add_days('2024-04-01', 10).isoformat() == '2024-04-11T00:00:00+10:00'

    def test_local_midnight_across_dst_start(self, sydney_time):
        assert add_days('2024-09-30', 10).isoformat() == '2024-10-10T00:00:00+11:00'

    def test_foreign_offset_is_kept(self, sydney_time):
        assert add_days('2024-03-01T00:00:00+00:00', 81).isoformat() == '2024-05-21T00:00:00+00:00'

    def test_schedule_dates_stay_on_local_midnight(self, sydney_time):
        schedule, harvest = generate_schedule('Tomatoes', '2024-03-01', 'seed', 'temperate')
        assert harvest == '2024-05-21T00:00:00+10:00'
        assert days_between('2024-03-01', harvest) == 81

        fertilise = [t for t in schedule if t.activity == 'Fertilise'][0]
        assert fertilise.due_date == '2024-03-22T00:00:00+11:00'
        for task in schedule:
            due = to_instant(task.due_date)
            assert (due.hour, due.minute) == (0, 0)
            assert due.utcoffset() == due.astimezone().utcoffset()

    def test_local_date(self, sydney_time):
        assert local_date(add_days('2024-03-01', 81)) == date(2024, 5, 21)
