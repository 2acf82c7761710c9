from datetime import date

import pytest

from benefit_tracker.cycles import ExpiryCycle, OneTimeCycle


def _monthly(last_reset=date(2024, 1, 15)):
    return ExpiryCycle(frequency="monthly", reset_type="calendar", last_reset=last_reset)


# --- Next reset date ---

def test_monthly_calendar_next_reset():
    assert _monthly().calculate_next_reset_date(date(2024, 1, 20)) == date(2024, 2, 1)


def test_monthly_expired_on_boundary_not_before():
    cycle = _monthly()
    assert cycle.is_expired(date(2024, 1, 31)) is False
    assert cycle.is_expired(date(2024, 2, 1)) is True


@pytest.mark.parametrize(
    "frequency, last_reset, expected",
    [
        ("quarterly", date(2024, 2, 10), date(2024, 4, 1)),
        ("quarterly", date(2024, 11, 30), date(2025, 1, 1)),
        ("biannual", date(2024, 3, 1), date(2024, 7, 1)),
        ("biannual", date(2024, 7, 1), date(2025, 1, 1)),
        ("annual", date(2024, 6, 15), date(2025, 1, 1)),
        ("every-4-years", date(2024, 1, 15), date(2028, 1, 1)),
    ],
)
def test_calendar_next_reset(frequency, last_reset, expected):
    cycle = ExpiryCycle(frequency=frequency, reset_type="calendar", last_reset=last_reset)
    assert cycle.calculate_next_reset_date(last_reset) == expected


def test_anniversary_annual_next_reset():
    cycle = ExpiryCycle(
        frequency="annual",
        reset_type="anniversary",
        last_reset=date(2024, 1, 15),
        anniversary_date=date(2020, 3, 10),
    )
    assert cycle.calculate_next_reset_date(date(2024, 1, 15)) == date(2024, 3, 10)


def test_anniversary_every_four_years():
    cycle = ExpiryCycle(
        frequency="every-4-years",
        reset_type="anniversary",
        last_reset=date(2024, 5, 1),
        anniversary_date=date(2019, 3, 10),
    )
    assert cycle.calculate_next_reset_date(date(2024, 5, 1)) == date(2028, 3, 10)


def test_anniversary_every_four_years_takes_first_anniversary_after_reset():
    cycle = ExpiryCycle(
        frequency="every-4-years",
        reset_type="anniversary",
        last_reset=date(2024, 1, 15),
        anniversary_date=date(2020, 3, 10),
    )
    assert cycle.calculate_next_reset_date(date(2024, 2, 1)) == date(2024, 3, 10)
    assert list(cycle.iter_reset_dates(date(2029, 1, 1))) == [date(2024, 3, 10), date(2028, 3, 10)]


def test_anniversary_every_four_years_leap_day():
    cycle = ExpiryCycle(
        frequency="every-4-years",
        reset_type="anniversary",
        last_reset=date(2024, 2, 29),
        anniversary_date=date(2020, 2, 29),
    )
    assert cycle.calculate_next_reset_date(date(2024, 3, 1)) == date(2028, 2, 29)


def test_anniversary_without_date_uses_calendar():
    cycle = ExpiryCycle(frequency="monthly", reset_type="anniversary", last_reset=date(2024, 1, 15))
    assert cycle.calculate_next_reset_date(date(2024, 1, 15)) == date(2024, 2, 1)


def test_next_reset_is_stable_as_reference_advances():
    cycle = _monthly()
    results = {cycle.calculate_next_reset_date(d) for d in (date(2024, 1, 16), date(2024, 3, 1), date(2025, 7, 4))}
    assert results == {date(2024, 2, 1)}


def test_missing_last_reset_never_expires():
    cycle = _monthly(last_reset=None)
    assert cycle.calculate_next_reset_date(date(2024, 5, 1)) is None
    assert cycle.is_expired(date(2030, 1, 1)) is False


@pytest.mark.parametrize("frequency", ["one-time", "carryover"])
def test_non_recurring_frequencies(frequency):
    cycle = ExpiryCycle(frequency=frequency, last_reset=date(2024, 1, 15))
    assert cycle.is_recurring() is False
    assert cycle.calculate_next_reset_date(date(2025, 1, 1)) is None
    assert cycle.is_expired(date(2025, 1, 1)) is False


# --- Catch-up over skipped periods ---

def test_missed_periods_after_long_absence():
    cycle = _monthly()
    assert cycle.missed_periods(date(2024, 1, 31)) == 0
    assert cycle.missed_periods(date(2024, 2, 1)) == 1
    assert cycle.missed_periods(date(2024, 5, 20)) == 4


def test_current_period_start_catches_up():
    cycle = _monthly()
    assert cycle.current_period_start(date(2024, 1, 20)) == date(2024, 1, 15)
    assert cycle.current_period_start(date(2024, 5, 20)) == date(2024, 5, 1)


def test_catch_up_is_idempotent():
    cycle = _monthly()
    today = date(2024, 9, 3)
    assert cycle.current_period_start(today) == cycle.current_period_start(today)
    assert list(cycle.iter_reset_dates(today)) == list(cycle.iter_reset_dates(today))


# --- Windows and deadlines ---

def test_days_until_reset_and_window():
    cycle = _monthly()
    today = date(2024, 1, 25)
    assert cycle.days_until_reset(today) == 7
    assert cycle.expires_within(today, 7) is True
    assert cycle.expires_within(today, 6) is False


def test_expires_within_excludes_overdue():
    assert _monthly().expires_within(date(2024, 2, 1), 30) is False


def test_deadline_is_day_before_reset():
    cycle = _monthly()
    today = date(2024, 1, 25)
    assert cycle.get_deadline(today) == date(2024, 1, 31)
    assert cycle.days_until_deadline(today) == 6
    assert cycle.deadline_within(today, 6) is True
    assert cycle.is_deadline_passed(today) is False
    assert cycle.is_deadline_passed(date(2024, 2, 1)) is True


# --- One-time ---

def test_one_time_cycle_deadline():
    cycle = OneTimeCycle(expiry_date=date(2024, 6, 30))
    today = date(2024, 6, 20)
    assert cycle.is_recurring() is False
    assert cycle.is_expired(date(2030, 1, 1)) is False
    assert cycle.get_deadline(today) == date(2024, 6, 30)
    assert cycle.days_until_deadline(today) == 10
    assert cycle.deadline_within(today, 10) is True
    assert cycle.is_deadline_passed(date(2024, 7, 1)) is True


def test_one_time_cycle_without_expiry():
    cycle = OneTimeCycle()
    assert cycle.get_deadline(date(2024, 1, 1)) is None
    assert cycle.deadline_within(date(2024, 1, 1), 30) is False
