from datetime import date

from benefit_tracker.cycles import MinimumSpendCycle


def test_one_time_deadline():
    cycle = MinimumSpendCycle(frequency="one-time", deadline=date(2024, 4, 30))
    assert cycle.get_deadline(date(2024, 1, 1)) == date(2024, 4, 30)
    assert cycle.is_expired(date(2024, 4, 30)) is False
    assert cycle.is_expired(date(2024, 5, 1)) is True
    assert cycle.should_reset(date(2030, 1, 1)) is False


def test_one_time_without_deadline_never_expires():
    cycle = MinimumSpendCycle(frequency="one-time")
    assert cycle.is_expired(date(2030, 1, 1)) is False
    assert cycle.days_until_deadline(date(2030, 1, 1)) is None


def test_recurring_calendar_period():
    cycle = MinimumSpendCycle(frequency="quarterly", reset_type="calendar", last_reset=date(2024, 1, 2))
    today = date(2024, 2, 15)
    assert cycle.get_period_start_date(today) == date(2024, 1, 1)
    assert cycle.get_deadline(today) == date(2024, 3, 31)
    assert cycle.days_until_deadline(today) == 45
    assert cycle.deadline_within(today, 45) is True
    assert cycle.deadline_within(today, 44) is False
    assert cycle.is_expired(today) is False


def test_yearly_is_annual():
    cycle = MinimumSpendCycle(frequency="yearly", reset_type="calendar")
    assert cycle.is_yearly() is True
    assert cycle.get_deadline(date(2024, 6, 1)) == date(2024, 12, 31)


def test_recurring_anniversary_period():
    cycle = MinimumSpendCycle(
        frequency="annual",
        reset_type="anniversary",
        last_reset=date(2024, 3, 10),
        anniversary_date=date(2020, 3, 10),
    )
    assert cycle.get_current_period(date(2024, 8, 1)) == (date(2024, 3, 10), date(2025, 3, 9))


def test_should_reset_once_new_period_starts():
    cycle = MinimumSpendCycle(frequency="monthly", reset_type="calendar", last_reset=date(2024, 1, 10))
    assert cycle.should_reset(date(2024, 1, 31)) is False
    assert cycle.should_reset(date(2024, 2, 1)) is True


def test_should_reset_requires_last_reset():
    cycle = MinimumSpendCycle(frequency="monthly", reset_type="calendar")
    assert cycle.should_reset(date(2024, 2, 1)) is False
