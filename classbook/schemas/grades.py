from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr

from classbook.models.enums import Category


class GradeEntry(BaseModel):
    """One graded, submitted item as seen by the weighting engine."""

    category: Category
    score: float
    max_score: Optional[float] = None  # None -> DEFAULT_MAX_SCORE


class GradeSummary(BaseModel):
    quiz_average: float
    assignment_average: float
    exam_average: float
    class_standing: float
    final_grade: float

    quiz_count: int = 0
    assignment_count: int = 0
    exam_count: int = 0


class GradeItemRow(BaseModel):
    submission_id: int
    item_id: int
    item_title: str
    category: Category

    raw_grade: Optional[float] = None
    max_score: float
    percentage: Optional[float] = None

    status: str  # "pending" | "submitted" | "graded"
    submitted_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    feedback: Optional[str] = None


class StudentGradeReport(BaseModel):
    student_id: int
    student_name: str
    student_email: EmailStr

    summary: GradeSummary
    total_items: int
    graded_items: int
    # submitted, not yet graded
    awaiting_grading: int

    items: list[GradeItemRow]


class RosterRow(BaseModel):
    student_id: int
    student_name: str
    student_email: EmailStr
    summary: GradeSummary


class DistributionBucket(BaseModel):
    name: str
    count: int
    share: int  # percent of all graded items


class PassRate(BaseModel):
    passing_students: int
    graded_students: int
    pass_rate: int


class GradeOverview(BaseModel):
    teacher_id: int
    total_students: int
    total_assignments: int
    total_quizzes: int
    total_exams: int

    total_graded: int
    pending_grading: int
    average_final_grade: float | None

    pass_rate: PassRate
    distribution: list[DistributionBucket]
