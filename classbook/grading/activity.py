from collections.abc import Iterable
from datetime import date, datetime, timedelta

from classbook.core.config import DEFAULT_ACTIVITY_WEEKS
from classbook.core.timeutils import as_utc, utc_now
from classbook.models.enums import Category
from classbook.schemas.analytics import ActivityEvent, WeeklyActivityRow

# category -> counter field on WeeklyActivityRow
_COUNTERS = {
    Category.assignment: "assignments",
    Category.quiz: "quizzes",
    Category.exam: "exams",
}


def week_start(moment: datetime) -> date:
    """Sunday (UTC) of the week containing moment."""
    day = as_utc(moment).date()
    # weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def bucket_weekly_activity(
    events: Iterable[ActivityEvent],
    weeks: int = DEFAULT_ACTIVITY_WEEKS,
    now: datetime | None = None,
) -> list[WeeklyActivityRow]:
    """
    Count created content per Sunday-to-Saturday week.

    Returns one row per week, oldest first, ending with the week that
    contains `now`. Events outside the window are ignored.
    """
    if weeks <= 0:
        return []

    current = week_start(now or utc_now())

    buckets: dict[date, WeeklyActivityRow] = {}
    for i in range(weeks):
        start = current - timedelta(weeks=weeks - 1 - i)
        buckets[start] = WeeklyActivityRow(
            week_label=f"Week {i + 1}",
            week_start=start,
            week_end=start + timedelta(days=6),
        )

    for event in events:
        row = buckets.get(week_start(event.created_at))
        if row is None:
            continue
        field = _COUNTERS[event.category]
        setattr(row, field, getattr(row, field) + 1)
        row.total += 1

    return list(buckets.values())
