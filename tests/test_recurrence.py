from datetime import date, datetime, timedelta

from subtracker.domain import Subscription
from subtracker.periods import advance
from subtracker.recurrence import (
    due_occurrence,
    has_occurrence_between,
    month_calendar,
    months_ahead,
    next_occurrence,
    occurrences_in_month,
)


def make_sub(id, period="Monthly", start="2024-01-15", status="active", price=10.0):
    return Subscription(id=id, name=f"Sub {id}", price=price, period=period, start_date=start, status=status)


NOW = date(2024, 3, 20)


def test_next_occurrence_monthly_catch_up():
    sub = make_sub("s1", "Monthly", "2024-01-15")
    assert next_occurrence(sub, NOW) == date(2024, 4, 15)


def test_next_occurrence_future_start_is_start():
    sub = make_sub("s1", "Monthly", "2024-05-01")
    assert next_occurrence(sub, NOW) == date(2024, 5, 1)


def test_next_occurrence_skips_billing_day_equal_to_now():
    sub = make_sub("s1", "Monthly", "2024-01-15")
    assert next_occurrence(sub, date(2024, 3, 15)) == date(2024, 4, 15)
    assert next_occurrence(make_sub("s2", "Weekly", "2024-03-20"), NOW) == date(2024, 3, 27)


def test_next_occurrence_weekly_far_in_the_past():
    # 2015-01-05 is a Monday; the next Monday after Wed 2024-03-20 is the 25th
    sub = make_sub("s1", "Weekly", "2015-01-05")
    assert next_occurrence(sub, NOW) == date(2024, 3, 25)


def test_next_occurrence_yearly():
    sub = make_sub("s1", "Yearly", "2020-08-14")
    assert next_occurrence(sub, date(2024, 8, 13)) == date(2024, 8, 14)
    assert next_occurrence(sub, date(2024, 8, 14)) == date(2025, 8, 14)


def test_next_occurrence_month_end_anchor():
    sub = make_sub("s1", "Monthly", "2024-01-31")
    assert next_occurrence(sub, date(2024, 2, 10)) == date(2024, 2, 29)
    assert next_occurrence(sub, date(2024, 3, 1)) == date(2024, 3, 29)


def test_next_occurrence_agrees_with_stepping_loop():
    for period, start, now in (
        ("Monthly", date(2024, 1, 31), date(2024, 3, 15)),
        ("Monthly", date(2023, 8, 31), date(2024, 6, 30)),
        ("Yearly", date(2020, 2, 29), date(2025, 1, 1)),
        ("Weekly", date(2023, 12, 31), date(2024, 3, 20)),
    ):
        expected = start
        while expected <= now:
            expected = advance(expected, period)
        assert next_occurrence(make_sub("s1", period, start.isoformat()), now) == expected
    assert next_occurrence(make_sub("s2", "Monthly", "2024-01-31"), date(2024, 3, 15)) == date(2024, 3, 29)


def test_next_occurrence_invalid_start_projects_from_now():
    assert next_occurrence(make_sub("s1", start="not a date"), NOW) == date(2024, 4, 20)
    assert next_occurrence(make_sub("s2", start=None), NOW) == date(2024, 4, 20)


def test_next_occurrence_accepts_datetime_and_is_idempotent():
    sub = make_sub("s1", "Monthly", "2024-01-15")
    instant = datetime(2024, 3, 20, 15, 30)
    assert next_occurrence(sub, instant) == date(2024, 4, 15)
    assert next_occurrence(sub, instant) == next_occurrence(sub, instant)


def test_next_occurrence_within_one_period_of_now():
    sub = make_sub("s1", "Weekly", "2023-01-03")
    day = date(2023, 1, 3)
    for _ in range(60):
        result = next_occurrence(sub, day)
        assert day < result <= day + timedelta(days=7)
        day += timedelta(days=5)


def test_due_occurrence_includes_today():
    sub = make_sub("s1", "Monthly", "2024-01-15")
    assert due_occurrence(sub, date(2024, 3, 15)) == date(2024, 3, 15)
    assert due_occurrence(sub, date(2024, 3, 16)) == date(2024, 4, 15)


def test_has_occurrence_between_half_open_window():
    sub = make_sub("s1", "Monthly", "2024-01-15")
    assert has_occurrence_between(sub, date(2024, 3, 14), date(2024, 3, 16))
    assert has_occurrence_between(sub, date(2024, 3, 14), date(2024, 3, 15))
    assert not has_occurrence_between(sub, date(2024, 3, 15), date(2024, 3, 20))
    assert not has_occurrence_between(sub, date(2024, 3, 20), date(2024, 3, 20))


def test_occurrences_in_month_monthly_clamped():
    sub = make_sub("s1", "Monthly", "2024-01-31")
    assert occurrences_in_month(sub, date(2024, 2, 1)) == (date(2024, 2, 29),)
    assert occurrences_in_month(sub, date(2024, 4, 10)) == (date(2024, 4, 30),)


def test_occurrences_in_month_before_start_is_empty():
    sub = make_sub("s1", "Monthly", "2024-01-31")
    assert occurrences_in_month(sub, date(2023, 12, 1)) == ()


def test_occurrences_in_month_yearly_only_in_anchor_month():
    sub = make_sub("s1", "Yearly", "2024-06-01")
    assert occurrences_in_month(sub, date(2025, 6, 10)) == (date(2025, 6, 1),)
    assert occurrences_in_month(sub, date(2025, 7, 1)) == ()


def test_occurrences_in_month_weekly_only_literal_start():
    sub = make_sub("s1", "Weekly", "2024-03-04")
    assert occurrences_in_month(sub, date(2024, 3, 1)) == (date(2024, 3, 4),)
    assert occurrences_in_month(sub, date(2024, 4, 1)) == ()


def test_occurrences_in_month_excludes_paused():
    sub = make_sub("s1", "Monthly", "2024-01-15", status="paused")
    assert occurrences_in_month(sub, date(2024, 3, 1)) == ()


def test_month_calendar_groups_by_day_in_input_order():
    subs = (
        make_sub("late", "Monthly", "2024-01-28"),
        make_sub("a", "Monthly", "2024-01-15"),
        make_sub("paused", "Monthly", "2024-01-15", status="paused"),
        make_sub("b", "Monthly", "2023-11-15"),
        make_sub("yearly", "Yearly", "2023-07-02"),
    )
    cal = month_calendar(subs, date(2024, 3, 1))

    assert list(cal) == [date(2024, 3, 15), date(2024, 3, 28)]
    assert [s.id for s in cal[date(2024, 3, 15)]] == ["a", "b"]
    assert all(day.year == 2024 and day.month == 3 for day in cal)


def test_months_ahead():
    assert months_ahead(date(2024, 11, 15), 3) == [date(2024, 11, 1), date(2024, 12, 1), date(2025, 1, 1)]
    assert months_ahead(date(2024, 11, 15), 0) == []
