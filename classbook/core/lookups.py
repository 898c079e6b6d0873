from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from classbook.models.enums import UserRole, UserStatus
from classbook.models.user import User


def _get_user_with_role(db: Session, user_id: int, role: UserRole) -> User | None:
    return (
        db.query(User)
        .filter(
            User.id == user_id,
            User.role == role.value,
            User.status != UserStatus.deleted.value,
        )
        .first()
    )


def get_student_or_404(db: Session, student_id: int) -> User:
    student = _get_user_with_role(db, student_id, UserRole.student)
    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
    return student


def get_teacher_or_404(db: Session, teacher_id: int) -> User:
    teacher = _get_user_with_role(db, teacher_id, UserRole.teacher)
    if not teacher:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Teacher not found",
        )
    return teacher
