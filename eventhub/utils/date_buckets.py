# eventhub/utils/date_buckets.py
"""
Symbolic date buckets used by the event listing filter.

Every bucket is evaluated against an event's start date only, relative to
"now", using local calendar dates:

* ``today`` / ``tomorrow``: same calendar day.
* ``this-week``: from today through the end of the week, where the end of the
  week is ``today + (7 - weekday)`` with Sunday as weekday 0.
* ``this-weekend``: inside ``this-week`` and on a Saturday or Sunday.
* ``next-week``: the seven days after the end of this week.
* ``this-month``: from today through the last day of the current month.

Unknown names (including ``"all"`` and ``None``) do not filter anything.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional

BUCKETS = ("today", "tomorrow", "this-week", "this-weekend", "next-week", "this-month")

SATURDAY = 5
SUNDAY = 6


def to_local_naive(value: datetime) -> datetime:
    """Aware values are converted to local time and lose their tzinfo."""
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def local_date(value: datetime) -> date:
    """Calendar day of ``value`` in local time; naive values are taken as local."""
    return to_local_naive(value).date()


def sunday_based_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class DateWindow:
    today: date
    tomorrow: date
    week_end: date
    next_week_end: date
    month_end: date

    @classmethod
    def from_now(cls, now: datetime) -> "DateWindow":
        today = local_date(now)
        week_end = today + timedelta(days=7 - sunday_based_weekday(today))
        last_day = calendar.monthrange(today.year, today.month)[1]
        return cls(
            today=today,
            tomorrow=today + timedelta(days=1),
            week_end=week_end,
            next_week_end=week_end + timedelta(days=7),
            month_end=today.replace(day=last_day),
        )


def date_predicate(
    bucket: Optional[str], now: datetime
) -> Optional[Callable[[datetime], bool]]:
    """
    Returns a predicate over an event's start date for ``bucket``,
    or ``None`` when the bucket means "no date filtering".
    """
    if bucket not in BUCKETS:
        return None

    w = DateWindow.from_now(now)

    def matches(start: datetime) -> bool:
        d = local_date(start)
        if bucket == "today":
            return d == w.today
        if bucket == "tomorrow":
            return d == w.tomorrow
        if bucket == "this-week":
            return w.today <= d <= w.week_end
        if bucket == "this-weekend":
            return w.today <= d <= w.week_end and d.weekday() in (SATURDAY, SUNDAY)
        if bucket == "next-week":
            return w.week_end < d <= w.next_week_end
        # this-month
        return w.today <= d <= w.month_end

    return matches
