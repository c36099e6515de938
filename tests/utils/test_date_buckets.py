from datetime import date, datetime, timezone

import pytest

from eventhub.utils.date_buckets import (
    DateWindow,
    date_predicate,
    sunday_based_weekday,
    to_local_naive,
)

WEDNESDAY = datetime(2024, 5, 15, 10, 0)
SUNDAY = datetime(2024, 5, 19, 21, 30)


def test_window_from_wednesday():
    w = DateWindow.from_now(WEDNESDAY)
    assert w.today == date(2024, 5, 15)
    assert w.tomorrow == date(2024, 5, 16)
    assert w.week_end == date(2024, 5, 19)
    assert w.next_week_end == date(2024, 5, 26)
    assert w.month_end == date(2024, 5, 31)


def test_on_sunday_the_week_runs_to_next_sunday():
    assert sunday_based_weekday(SUNDAY.date()) == 0
    assert DateWindow.from_now(SUNDAY).week_end == date(2024, 5, 26)


def test_month_end_in_february_of_leap_year():
    assert DateWindow.from_now(datetime(2024, 2, 10)).month_end == date(2024, 2, 29)


@pytest.mark.parametrize(
    "bucket,start,expected",
    [
        ("today", datetime(2024, 5, 15, 23, 59), True),
        ("today", datetime(2024, 5, 15, 0, 0), True),
        ("today", datetime(2024, 5, 16, 0, 0), False),
        ("tomorrow", datetime(2024, 5, 16, 8, 0), True),
        ("tomorrow", datetime(2024, 5, 15, 8, 0), False),
        ("this-week", datetime(2024, 5, 15, 8, 0), True),
        ("this-week", datetime(2024, 5, 19, 20, 0), True),
        ("this-week", datetime(2024, 5, 20, 0, 0), False),
        ("this-week", datetime(2024, 5, 14, 23, 0), False),
        ("this-weekend", datetime(2024, 5, 18, 10, 0), True),
        ("this-weekend", datetime(2024, 5, 19, 10, 0), True),
        ("this-weekend", datetime(2024, 5, 17, 10, 0), False),
        ("this-weekend", datetime(2024, 5, 25, 10, 0), False),
        ("next-week", datetime(2024, 5, 19, 23, 0), False),
        ("next-week", datetime(2024, 5, 20, 0, 0), True),
        ("next-week", datetime(2024, 5, 26, 12, 0), True),
        ("next-week", datetime(2024, 5, 27, 0, 0), False),
        ("this-month", datetime(2024, 5, 31, 23, 0), True),
        ("this-month", datetime(2024, 6, 1, 0, 0), False),
        ("this-month", datetime(2024, 5, 1, 0, 0), False),
    ],
)
def test_buckets_from_wednesday(bucket, start, expected):
    predicate = date_predicate(bucket, WEDNESDAY)
    assert predicate(start) is expected


def test_weekend_on_a_sunday_covers_following_weekend():
    predicate = date_predicate("this-weekend", SUNDAY)
    assert predicate(datetime(2024, 5, 19, 23, 0))
    assert predicate(datetime(2024, 5, 25, 9, 0))
    assert predicate(datetime(2024, 5, 26, 9, 0))
    assert not predicate(datetime(2024, 5, 24, 9, 0))


@pytest.mark.parametrize("bucket", [None, "all", "", "yesterday"])
def test_unknown_buckets_do_not_filter(bucket):
    assert date_predicate(bucket, WEDNESDAY) is None


def test_to_local_naive():
    aware = datetime(2024, 5, 15, 9, 0, tzinfo=timezone.utc)
    converted = to_local_naive(aware)
    assert converted.tzinfo is None
    assert converted == aware.astimezone().replace(tzinfo=None)
    assert to_local_naive(WEDNESDAY) is WEDNESDAY
