from collections.abc import Iterable, Mapping

from classbook.core.config import DEFAULT_MAX_SCORE, PASSING_PERCENTAGE
from classbook.grading.weights import average, item_percentage, round_half_up, round_percent
from classbook.schemas.analytics import QuizPerformanceRow, QuizScore
from classbook.schemas.grades import DistributionBucket, PassRate

# (label, lower bound inclusive, upper bound inclusive), checked top-down
GRADE_BANDS = (
    ("A (90-100)", 90, 100),
    ("B (80-89)", 80, None),
    ("C (70-79)", 70, None),
    ("F (Below 70)", None, None),
)


def quiz_performance(scores: Iterable[QuizScore]) -> list[QuizPerformanceRow]:
    """Average percentage per quiz, best first."""
    grouped: dict[int, dict] = {}
    for s in scores:
        data = grouped.setdefault(
            s.quiz_id,
            {
                "title": s.title,
                "total_points": s.max_score if s.max_score is not None else DEFAULT_MAX_SCORE,
                "percentages": [],
            },
        )
        data["percentages"].append(item_percentage(s.score, s.max_score))

    rows = [
        QuizPerformanceRow(
            quiz_id=quiz_id,
            topic=data["title"],
            average_score=round_half_up(average(data["percentages"]), 1),
            submission_count=len(data["percentages"]),
            total_points=data["total_points"],
        )
        for quiz_id, data in grouped.items()
    ]
    rows.sort(key=lambda r: (-r.average_score, r.topic))
    return rows


def _band(percentage: float) -> str | None:
    """Band label, or None above 100 (extra credit is not banded)."""
    for label, lower, upper in GRADE_BANDS:
        if upper is not None and percentage > upper:
            return None
        if lower is None or percentage >= lower:
            return label
    return None


def grade_distribution(percentages: Iterable[float]) -> list[DistributionBucket]:
    """
    Count graded items per band. Shares are taken over every graded item,
    so an item scored above 100% counts toward the total but in no band.
    """
    counts = {label: 0 for label, _, _ in GRADE_BANDS}
    total = 0
    for p in percentages:
        total += 1
        label = _band(p)
        if label is not None:
            counts[label] += 1

    return [
        DistributionBucket(
            name=label,
            count=count,
            share=round_percent(count * 100 / total) if total > 0 else 0,
        )
        for label, count in counts.items()
    ]


def pass_rate(per_student: Mapping[int, list[float]]) -> PassRate:
    """
    A student passes with at least one graded item at PASSING_PERCENTAGE or
    above. Students without graded work are left out of the denominator.
    """
    graded = [ps for ps in per_student.values() if ps]
    passing = sum(1 for ps in graded if max(ps) >= PASSING_PERCENTAGE)

    return PassRate(
        passing_students=passing,
        graded_students=len(graded),
        pass_rate=round_percent(passing * 100 / len(graded)) if graded else 0,
    )
