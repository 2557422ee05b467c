import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base


class DeadlineType(str, enum.Enum):
    submission = "submission"
    review = "review"
    metareview = "metareview"


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    staggered_deadline = Column(Boolean, nullable=False, default=False)
    review_rounds = Column(Integer, nullable=False, default=1)
    is_microtask = Column(Boolean, nullable=False, default=False)
    days_between_submissions = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)

    topics = relationship("Topic", back_populates="assignment", cascade="all, delete-orphan")
    teams = relationship("Team", back_populates="assignment", cascade="all, delete-orphan")
    due_dates = relationship("AssignmentDueDate", back_populates="assignment", cascade="all, delete-orphan")


class AssignmentDueDate(Base):
    __tablename__ = "assignment_due_dates"

    id = Column(Integer, primary_key=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), nullable=False)
    deadline_type = Column(Enum(DeadlineType, name="deadline_type"), nullable=False)
    # null for metareview
    round = Column(Integer, nullable=True)
    due_at = Column(DateTime, nullable=False)

    assignment = relationship("Assignment", back_populates="due_dates")
