import logging
from collections.abc import Iterable

from classbook.core.timeutils import as_utc
from classbook.grading.weights import round_half_up
from classbook.schemas.analytics import TimelinessRecord, TimelinessSummary

logger = logging.getLogger(__name__)


def _percent(count: int, total: int) -> float:
    return round_half_up(count * 100 / total) if total > 0 else 0.0


def classify_timeliness(
    records: Iterable[TimelinessRecord],
    expected_submissions: int,
) -> TimelinessSummary:
    """
    Split expected submissions into on time / late / not submitted.

    Only submitted records are classified. "Not submitted" is the residual
    expected - (on_time + late), floored at 0, because submission rows may
    not exist yet for every assigned student.
    """
    on_time = 0
    late = 0

    for record in records:
        if not record.is_submitted:
            continue
        if record.submitted_at is None or record.due_date is None:
            # nothing to compare against
            on_time += 1
        elif as_utc(record.submitted_at) <= as_utc(record.due_date):
            on_time += 1
        else:
            late += 1

    submitted = on_time + late
    if submitted > expected_submissions:
        logger.warning(
            "timeliness: %d submitted records exceed %d expected submissions; "
            "not_submitted floored at 0",
            submitted,
            expected_submissions,
        )
    not_submitted = max(0, expected_submissions - submitted)

    total = expected_submissions
    return TimelinessSummary(
        on_time=on_time,
        late=late,
        not_submitted=not_submitted,
        total=total,
        on_time_percentage=_percent(on_time, total),
        late_percentage=_percent(late, total),
        not_submitted_percentage=_percent(not_submitted, total),
    )
