"""
Grade aggregation and weighting.

Two-stage weighting:
- class standing = quiz average * 0.45 + assignment average * 0.15
- final grade    = class standing * 0.60 + exam average * 0.40

Averages are means of per-item percentages. A category with no graded
items averages 0 and still takes part in the formula.

Display values are rounded half up (12.5 -> 13), not to even.
"""
import logging
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal

from classbook.core.config import DEFAULT_MAX_SCORE
from classbook.models.enums import Category
from classbook.schemas.grades import GradeEntry, GradeSummary

logger = logging.getLogger(__name__)

QUIZ_WEIGHT = 0.45
ASSIGNMENT_WEIGHT = 0.15
CLASS_STANDING_WEIGHT = 0.60
EXAM_WEIGHT = 0.40


def round_half_up(value: float, places: int = 2) -> float:
    # repr() gives the shortest decimal form, so 3.125 stays a tie
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_percent(value: float) -> int:
    """Whole-number percentage, halves rounded up."""
    return int(round_half_up(value, 0))


def item_percentage(score: float, max_score: float | None = None) -> float:
    """Score as a percentage of max_score; a max of 0 counts as 0%."""
    if max_score is None:
        max_score = DEFAULT_MAX_SCORE
    if max_score == 0:
        return 0.0
    return score * 100 / max_score


def average(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def class_standing(quiz_average: float, assignment_average: float) -> float:
    return quiz_average * QUIZ_WEIGHT + assignment_average * ASSIGNMENT_WEIGHT


def final_grade(standing: float, exam_average: float) -> float:
    return standing * CLASS_STANDING_WEIGHT + exam_average * EXAM_WEIGHT


def _category_percentages(entries: Iterable[GradeEntry]) -> dict[Category, list[float]]:
    percentages: dict[Category, list[float]] = {c: [] for c in Category}
    for entry in entries:
        percentages[entry.category].append(item_percentage(entry.score, entry.max_score))
    return percentages


def unrounded_final_grade(entries: Iterable[GradeEntry]) -> float:
    """Final grade for one student at full precision."""
    percentages = _category_percentages(entries)
    standing = class_standing(
        average(percentages[Category.quiz]),
        average(percentages[Category.assignment]),
    )
    return final_grade(standing, average(percentages[Category.exam]))


def average_final_grade(entries_by_student: Mapping[int, list[GradeEntry]]) -> float | None:
    """
    Class average of final grades across students with graded work.

    Finals are averaged unrounded and the mean is rounded once. None when
    no student has graded work.
    """
    finals = [unrounded_final_grade(entries) for entries in entries_by_student.values() if entries]
    if not finals:
        return None
    return round_half_up(average(finals))


def summarize_grades(entries: Iterable[GradeEntry]) -> GradeSummary:
    """
    Category averages and composites for one student.

    Callers pass only submitted, graded work. Nothing is rounded until the
    summary is built.
    """
    percentages = _category_percentages(entries)

    quiz_avg = average(percentages[Category.quiz])
    assignment_avg = average(percentages[Category.assignment])
    exam_avg = average(percentages[Category.exam])

    standing = class_standing(quiz_avg, assignment_avg)
    final = final_grade(standing, exam_avg)

    logger.debug(
        "grades: quiz=%.4f assignment=%.4f exam=%.4f -> standing=%.4f final=%.4f",
        quiz_avg,
        assignment_avg,
        exam_avg,
        standing,
        final,
    )

    return GradeSummary(
        quiz_average=round_half_up(quiz_avg),
        assignment_average=round_half_up(assignment_avg),
        exam_average=round_half_up(exam_avg),
        class_standing=round_half_up(standing),
        final_grade=round_half_up(final),
        quiz_count=len(percentages[Category.quiz]),
        assignment_count=len(percentages[Category.assignment]),
        exam_count=len(percentages[Category.exam]),
    )
