import enum


class Category(str, enum.Enum):
    assignment = "assignment"
    quiz = "quiz"
    exam = "exam"


class UserRole(str, enum.Enum):
    student = "student"
    teacher = "teacher"
    administrator = "administrator"


class UserStatus(str, enum.Enum):
    active = "active"
    deactivated = "deactivated"
    deleted = "deleted"
