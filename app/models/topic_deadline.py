from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.assignment import DeadlineType


class TopicDeadline(Base):
    __tablename__ = "topic_deadlines"
    __table_args__ = (
        UniqueConstraint("topic_id", "deadline_type", "round", name="uq_topic_deadlines_topic_type_round"),
    )

    id = Column(Integer, primary_key=True)
    topic_id = Column(Integer, ForeignKey("sign_up_topics.id"), nullable=False)
    deadline_type = Column(Enum(DeadlineType, name="deadline_type"), nullable=False)
    round = Column(Integer, nullable=True)
    due_at = Column(DateTime, nullable=False)

    topic = relationship("Topic", back_populates="deadlines")
