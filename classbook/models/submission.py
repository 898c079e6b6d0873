from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship

from classbook.db.base_class import Base

class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    item_id = Column(Integer, ForeignKey("gradable_items.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # a row may exist before the student hands anything in
    is_submitted = Column(Boolean, nullable=False, default=False, index=True)
    submitted_at = Column(DateTime, nullable=True)

    # Grading fields (nullable until graded)
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    graded_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("item_id", "student_id", name="uq_submission_item_student"),
    )

    item = relationship("GradableItem", back_populates="submissions")
    student = relationship("User", back_populates="submissions")
