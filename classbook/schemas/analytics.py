from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from classbook.models.enums import Category


class TimelinessRecord(BaseModel):
    is_submitted: bool
    submitted_at: Optional[datetime] = None
    due_date: Optional[datetime] = None


class TimelinessSummary(BaseModel):
    on_time: int
    late: int
    not_submitted: int
    total: int

    on_time_percentage: float
    late_percentage: float
    not_submitted_percentage: float


class ActivityEvent(BaseModel):
    created_at: datetime
    category: Category


class WeeklyActivityRow(BaseModel):
    week_label: str
    week_start: date
    week_end: date

    assignments: int = 0
    quizzes: int = 0
    exams: int = 0
    total: int = 0


class QuizScore(BaseModel):
    quiz_id: int
    title: str
    score: float
    max_score: Optional[float] = None


class QuizPerformanceRow(BaseModel):
    quiz_id: int
    topic: str
    average_score: float
    submission_count: int
    total_points: float


class TeacherAnalytics(BaseModel):
    quiz_performance: list[QuizPerformanceRow]
    submission_timeliness: TimelinessSummary
    weekly_activity: list[WeeklyActivityRow]
