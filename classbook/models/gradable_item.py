from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Table, Text, func
from sqlalchemy.orm import relationship

from classbook.core.config import DEFAULT_MAX_SCORE
from classbook.db.base_class import Base

# students an item is assigned to
item_assignees = Table(
    "item_assignees",
    Base.metadata,
    Column("item_id", Integer, ForeignKey("gradable_items.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class GradableItem(Base):
    """An assignment, quiz or exam created by a teacher."""

    __tablename__ = "gradable_items"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(20), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    max_score = Column(Float, nullable=True)

    assigned_by_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    assigned_by = relationship("User", foreign_keys=[assigned_by_id])
    assigned_to = relationship("User", secondary=item_assignees)

    submissions = relationship("Submission", back_populates="item", cascade="all, delete-orphan")

    @property
    def effective_max_score(self) -> float:
        return self.max_score if self.max_score is not None else DEFAULT_MAX_SCORE
