from datetime import date

from subtracker.periods import (
    MONTHLY, WEEKLY, YEARLY,
    add_month, add_week, add_weeks, add_year, advance, canonical_period,
)


def test_add_week():
    assert add_week(date(2024, 1, 1)) == date(2024, 1, 8)
    assert add_week(date(2024, 12, 28)) == date(2025, 1, 4)


def test_add_month_plain_and_year_rollover():
    assert add_month(date(2024, 1, 15)) == date(2024, 2, 15)
    assert add_month(date(2024, 12, 15)) == date(2025, 1, 15)


def test_add_month_clamps_to_last_day():
    assert add_month(date(2024, 1, 31)) == date(2024, 2, 29)
    assert add_month(date(2023, 1, 31)) == date(2023, 2, 28)
    assert add_month(date(2024, 3, 31)) == date(2024, 4, 30)


def test_add_year_leap_day():
    assert add_year(date(2024, 2, 29)) == date(2025, 2, 28)
    assert add_year(date(2023, 6, 1)) == date(2024, 6, 1)


def test_month_steps_carry_the_clamped_day():
    d = date(2024, 1, 31)
    seen = []
    for _ in range(3):
        d = advance(d, MONTHLY)
        seen.append(d)
    assert seen == [date(2024, 2, 29), date(2024, 3, 29), date(2024, 4, 29)]
    assert advance(advance(date(2024, 2, 29), YEARLY), YEARLY) == date(2026, 2, 28)


def test_add_weeks_matches_single_steps():
    d = date(2024, 1, 1)
    for _ in range(10):
        d = add_week(d)
    assert add_weeks(date(2024, 1, 1), 10) == d == date(2024, 3, 11)
    assert add_weeks(date(2024, 1, 1), 0) == date(2024, 1, 1)


def test_canonical_period_falls_back_to_monthly():
    assert canonical_period("weekly") == WEEKLY
    assert canonical_period(" YEARLY ") == YEARLY
    assert canonical_period("Quarterly") == MONTHLY
    assert canonical_period(None) == MONTHLY


def test_advance_unknown_period_steps_monthly():
    assert advance(date(2024, 1, 15), "bogus") == date(2024, 2, 15)
    assert advance(date(2024, 1, 15), WEEKLY) == date(2024, 1, 22)
