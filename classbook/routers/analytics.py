import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from classbook.core.config import DEFAULT_ACTIVITY_WEEKS, MAX_ACTIVITY_WEEKS
from classbook.core.deps import get_db
from classbook.core.lookups import get_teacher_or_404
from classbook.grading.activity import bucket_weekly_activity
from classbook.grading.performance import quiz_performance
from classbook.grading.timeliness import classify_timeliness
from classbook.models.enums import Category
from classbook.models.gradable_item import GradableItem, item_assignees
from classbook.models.submission import Submission
from classbook.schemas.analytics import (
    ActivityEvent,
    QuizPerformanceRow,
    QuizScore,
    TeacherAnalytics,
    TimelinessRecord,
    TimelinessSummary,
    WeeklyActivityRow,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teachers/{teacher_id}/analytics")


def _quiz_performance(db: Session, teacher_id: int) -> list[QuizPerformanceRow]:
    rows = (
        db.query(
            GradableItem.id,
            GradableItem.title,
            GradableItem.max_score,
            Submission.grade,
        )
        .join(Submission, Submission.item_id == GradableItem.id)
        .filter(
            GradableItem.assigned_by_id == teacher_id,
            GradableItem.category == Category.quiz.value,
            Submission.is_submitted.is_(True),
            Submission.grade.is_not(None),
        )
        .all()
    )

    return quiz_performance(
        QuizScore(quiz_id=r.id, title=r.title, score=r.grade, max_score=r.max_score)
        for r in rows
    )


def _submission_timeliness(
    db: Session,
    teacher_id: int,
    category: Category | None = None,
) -> TimelinessSummary:
    # only items with a due date take part
    filters = [
        GradableItem.assigned_by_id == teacher_id,
        GradableItem.due_date.is_not(None),
    ]
    if category is not None:
        filters.append(GradableItem.category == category.value)

    expected = (
        db.query(func.count())
        .select_from(item_assignees)
        .join(GradableItem, GradableItem.id == item_assignees.c.item_id)
        .filter(*filters)
        .scalar()
    ) or 0

    rows = (
        db.query(
            Submission.is_submitted,
            Submission.submitted_at,
            GradableItem.due_date,
        )
        .join(GradableItem, GradableItem.id == Submission.item_id)
        .filter(*filters)
        .all()
    )

    logger.debug(
        "timeliness teacher=%s category=%s: %d expected, %d submission rows",
        teacher_id,
        category.value if category else "all",
        expected,
        len(rows),
    )

    return classify_timeliness(
        (
            TimelinessRecord(
                is_submitted=r.is_submitted,
                submitted_at=r.submitted_at,
                due_date=r.due_date,
            )
            for r in rows
        ),
        expected_submissions=int(expected),
    )


def _weekly_activity(db: Session, teacher_id: int, weeks: int) -> list[WeeklyActivityRow]:
    rows = (
        db.query(GradableItem.created_at, GradableItem.category)
        .filter(GradableItem.assigned_by_id == teacher_id)
        .all()
    )

    return bucket_weekly_activity(
        (ActivityEvent(created_at=r.created_at, category=Category(r.category)) for r in rows),
        weeks=weeks,
    )


@router.get("/quiz-performance", response_model=list[QuizPerformanceRow])
def get_quiz_performance(
    teacher_id: int,
    db: Session = Depends(get_db),
):
    teacher = get_teacher_or_404(db, teacher_id)
    return _quiz_performance(db, teacher.id)


@router.get("/submission-timeliness", response_model=TimelinessSummary)
def get_submission_timeliness(
    teacher_id: int,
    category: Optional[Category] = None,
    db: Session = Depends(get_db),
):
    teacher = get_teacher_or_404(db, teacher_id)
    return _submission_timeliness(db, teacher.id, category)


@router.get("/weekly-activity", response_model=list[WeeklyActivityRow])
def get_weekly_activity(
    teacher_id: int,
    weeks: int = Query(DEFAULT_ACTIVITY_WEEKS, ge=1, le=MAX_ACTIVITY_WEEKS),
    db: Session = Depends(get_db),
):
    teacher = get_teacher_or_404(db, teacher_id)
    return _weekly_activity(db, teacher.id, weeks)


@router.get("", response_model=TeacherAnalytics)
def get_teacher_analytics(
    teacher_id: int,
    db: Session = Depends(get_db),
):
    teacher = get_teacher_or_404(db, teacher_id)
    return TeacherAnalytics(
        quiz_performance=_quiz_performance(db, teacher.id),
        submission_timeliness=_submission_timeliness(db, teacher.id),
        weekly_activity=_weekly_activity(db, teacher.id, DEFAULT_ACTIVITY_WEEKS),
    )
