from collections import defaultdict

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from classbook.core.deps import get_db
from classbook.core.lookups import get_student_or_404, get_teacher_or_404
from classbook.grading.performance import grade_distribution, pass_rate
from classbook.grading.weights import (
    average_final_grade,
    item_percentage,
    round_half_up,
    summarize_grades,
)
from classbook.models.enums import Category, UserRole, UserStatus
from classbook.models.gradable_item import GradableItem
from classbook.models.submission import Submission
from classbook.models.user import User
from classbook.schemas.grades import (
    GradeEntry,
    GradeItemRow,
    GradeOverview,
    RosterRow,
    StudentGradeReport,
)

router = APIRouter()


def _report_order_by():
    """
    Student report ordering:
    - due_date NULLs last (SQLite-safe)
    - due_date ascending
    - item id ascending (stable tie-break)
    """
    return (
        GradableItem.due_date.is_(None),
        GradableItem.due_date.asc(),
        GradableItem.id.asc(),
    )


def _submission_status(sub: Submission) -> str:
    if not sub.is_submitted:
        return "pending"
    if sub.grade is None:
        return "submitted"
    return "graded"


def _assigned_students(db: Session, teacher_id: int) -> list[User]:
    return (
        db.query(User)
        .filter(
            User.role == UserRole.student.value,
            User.assigned_teacher_id == teacher_id,
            User.status != UserStatus.deleted.value,
        )
        .order_by(User.last_name.asc(), User.first_name.asc(), User.id.asc())
        .all()
    )


def _graded_entries_by_student(db: Session, student_ids: list[int]) -> dict[int, list[GradeEntry]]:
    """Submitted, graded work per student, shaped for the weighting engine."""
    if not student_ids:
        return {}

    rows = (
        db.query(
            Submission.student_id,
            Submission.grade,
            GradableItem.category,
            GradableItem.max_score,
        )
        .join(GradableItem, GradableItem.id == Submission.item_id)
        .filter(
            Submission.student_id.in_(student_ids),
            Submission.is_submitted.is_(True),
            Submission.grade.is_not(None),
        )
        .all()
    )

    entries: dict[int, list[GradeEntry]] = defaultdict(list)
    for r in rows:
        entries[r.student_id].append(
            GradeEntry(category=Category(r.category), score=r.grade, max_score=r.max_score)
        )
    return entries


@router.get("/students/{student_id}/grades", response_model=StudentGradeReport)
def student_grades(
    student_id: int,
    db: Session = Depends(get_db),
):
    student = get_student_or_404(db, student_id)

    rows = (
        db.query(Submission, GradableItem)
        .join(GradableItem, GradableItem.id == Submission.item_id)
        .filter(Submission.student_id == student.id)
        .order_by(*_report_order_by())
        .all()
    )

    items: list[dict] = []
    entries: list[GradeEntry] = []
    for sub, item in rows:
        status_val = _submission_status(sub)
        max_score = item.effective_max_score

        percentage = None
        if status_val == "graded":
            percentage = round_half_up(item_percentage(sub.grade, max_score))
            entries.append(
                GradeEntry(category=Category(item.category), score=sub.grade, max_score=max_score)
            )

        items.append(
            {
                "submission_id": sub.id,
                "item_id": item.id,
                "item_title": item.title,
                "category": item.category,
                "raw_grade": sub.grade,
                "max_score": max_score,
                "percentage": percentage,
                "status": status_val,
                "submitted_at": sub.submitted_at,
                "graded_at": sub.graded_at,
                "due_date": item.due_date,
                "feedback": sub.feedback,
            }
        )

    return {
        "student_id": student.id,
        "student_name": student.full_name,
        "student_email": student.email,
        "summary": summarize_grades(entries),
        "total_items": len(items),
        "graded_items": len(entries),
        "awaiting_grading": sum(1 for i in items if i["status"] == "submitted"),
        "items": items,
    }


@router.get("/teachers/{teacher_id}/grades/report", response_model=list[RosterRow])
def teacher_grade_report(
    teacher_id: int,
    db: Session = Depends(get_db),
):
    teacher = get_teacher_or_404(db, teacher_id)

    students = _assigned_students(db, teacher.id)
    entries = _graded_entries_by_student(db, [s.id for s in students])

    return [
        {
            "student_id": s.id,
            "student_name": s.full_name,
            "student_email": s.email,
            "summary": summarize_grades(entries.get(s.id, [])),
        }
        for s in students
    ]


@router.get("/teachers/{teacher_id}/grades/overview", response_model=GradeOverview)
def teacher_grade_overview(
    teacher_id: int,
    db: Session = Depends(get_db),
):
    teacher = get_teacher_or_404(db, teacher_id)

    students = _assigned_students(db, teacher.id)
    student_ids = [s.id for s in students]
    entries = _graded_entries_by_student(db, student_ids)

    per_student = {
        sid: [item_percentage(e.score, e.max_score) for e in student_entries]
        for sid, student_entries in entries.items()
    }
    all_percentages = [p for ps in per_student.values() for p in ps]

    pending_grading = 0
    if student_ids:
        pending_grading = (
            db.query(func.count(Submission.id))
            .filter(
                Submission.student_id.in_(student_ids),
                Submission.is_submitted.is_(True),
                Submission.grade.is_(None),
            )
            .scalar()
        ) or 0

    item_counts = dict(
        db.query(GradableItem.category, func.count(GradableItem.id))
        .filter(GradableItem.assigned_by_id == teacher.id)
        .group_by(GradableItem.category)
        .all()
    )

    return {
        "teacher_id": teacher.id,
        "total_students": len(students),
        "total_assignments": int(item_counts.get(Category.assignment.value, 0)),
        "total_quizzes": int(item_counts.get(Category.quiz.value, 0)),
        "total_exams": int(item_counts.get(Category.exam.value, 0)),
        "total_graded": len(all_percentages),
        "pending_grading": int(pending_grading),
        "average_final_grade": average_final_grade(entries),
        "pass_rate": pass_rate(per_student),
        "distribution": grade_distribution(all_percentages),
    }
