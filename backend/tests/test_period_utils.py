from datetime import date

from benefit_tracker.utils.period_utils import (
    anniversary_in_year,
    get_current_period,
    next_period_start,
)


# --- Calendar monthly ---

def test_calendar_monthly_mid_month():
    start, end = get_current_period("monthly", "calendar", None, date(2025, 3, 15))
    assert start == date(2025, 3, 1)
    assert end == date(2025, 3, 31)


def test_calendar_monthly_last_day_of_february():
    start, end = get_current_period("monthly", "calendar", None, date(2024, 2, 29))
    assert start == date(2024, 2, 1)
    assert end == date(2024, 2, 29)


# --- Calendar quarterly ---

def test_calendar_quarterly_q1():
    start, end = get_current_period("quarterly", "calendar", None, date(2025, 2, 15))
    assert start == date(2025, 1, 1)
    assert end == date(2025, 3, 31)


def test_calendar_quarterly_q4():
    start, end = get_current_period("quarterly", "calendar", None, date(2025, 12, 1))
    assert start == date(2025, 10, 1)
    assert end == date(2025, 12, 31)


# --- Calendar biannual ---

def test_calendar_biannual_h1():
    start, end = get_current_period("biannual", "calendar", None, date(2025, 4, 10))
    assert start == date(2025, 1, 1)
    assert end == date(2025, 6, 30)


def test_calendar_biannual_h2():
    start, end = get_current_period("biannual", "calendar", None, date(2025, 9, 1))
    assert start == date(2025, 7, 1)
    assert end == date(2025, 12, 31)


# --- Calendar annual ---

def test_calendar_annual():
    start, end = get_current_period("annual", "calendar", None, date(2025, 6, 15))
    assert start == date(2025, 1, 1)
    assert end == date(2025, 12, 31)


def test_calendar_yearly_matches_annual():
    assert get_current_period("yearly", "calendar", None, date(2025, 6, 15)) == get_current_period(
        "annual", "calendar", None, date(2025, 6, 15)
    )


# --- Anniversary ---

def test_anniversary_monthly():
    start, end = get_current_period("monthly", "anniversary", date(2024, 1, 15), date(2025, 3, 20))
    assert start == date(2025, 3, 15)
    assert end == date(2025, 4, 14)


def test_anniversary_annual():
    start, end = get_current_period("annual", "anniversary", date(2023, 6, 1), date(2025, 8, 15))
    assert start == date(2025, 6, 1)
    assert end == date(2026, 5, 31)


def test_anniversary_annual_before_this_years_anniversary():
    start, end = get_current_period("annual", "anniversary", date(2023, 6, 1), date(2025, 3, 1))
    assert start == date(2024, 6, 1)
    assert end == date(2025, 5, 31)


def test_anniversary_quarterly():
    start, end = get_current_period("quarterly", "anniversary", date(2024, 3, 10), date(2025, 4, 5))
    assert start == date(2025, 3, 10)
    assert end == date(2025, 6, 9)


def test_anniversary_quarterly_keeps_month_phase():
    # Phase months for a March 10 anniversary are Mar, Jun, Sep, Dec
    start, end = get_current_period("quarterly", "anniversary", date(2020, 3, 10), date(2025, 2, 1))
    assert start == date(2024, 12, 10)
    assert end == date(2025, 3, 9)


def test_anniversary_on_boundary():
    start, end = get_current_period("annual", "anniversary", date(2023, 6, 1), date(2025, 6, 1))
    assert start == date(2025, 6, 1)
    assert end == date(2026, 5, 31)


# --- Month-end anniversaries clamp without drifting ---

def test_anniversary_on_31st_clamps_to_february():
    start, end = get_current_period("monthly", "anniversary", date(2024, 1, 31), date(2025, 3, 15))
    assert start == date(2025, 2, 28)
    assert end == date(2025, 3, 30)


def test_anniversary_on_31st_returns_to_31st_after_february():
    start, end = get_current_period("monthly", "anniversary", date(2024, 1, 31), date(2025, 4, 5))
    assert start == date(2025, 3, 31)
    assert end == date(2025, 4, 29)


def test_anniversary_without_date_falls_back_to_calendar():
    start, end = get_current_period("quarterly", "anniversary", None, date(2025, 5, 5))
    assert start == date(2025, 4, 1)
    assert end == date(2025, 6, 30)


# --- Helpers ---

def test_next_period_start_is_strictly_after():
    assert next_period_start("monthly", "calendar", None, date(2024, 1, 31)) == date(2024, 2, 1)
    assert next_period_start("monthly", "calendar", None, date(2024, 2, 1)) == date(2024, 3, 1)


def test_anniversary_in_year_clamps_leap_day():
    assert anniversary_in_year(date(2024, 2, 29), 2025) == date(2025, 2, 28)
    assert anniversary_in_year(date(2024, 2, 29), 2028) == date(2028, 2, 29)
