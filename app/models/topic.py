from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class Topic(Base):
    __tablename__ = "sign_up_topics"
    __table_args__ = (UniqueConstraint("assignment_id", "topic_name", name="uq_sign_up_topics_assignment_name"),)

    id = Column(Integer, primary_key=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), nullable=False)
    topic_name = Column(String, nullable=False)
    topic_identifier = Column(String, nullable=True)
    category = Column(String, nullable=True)
    max_choosers = Column(Integer, nullable=False, default=0)
    micropayment = Column(Numeric(10, 2), nullable=True)

    assignment = relationship("Assignment", back_populates="topics")
    signups = relationship(
        "Signup", back_populates="topic", cascade="all, delete-orphan", order_by="Signup.id"
    )
    dependencies = relationship(
        "TopicDependency",
        foreign_keys="TopicDependency.topic_id",
        back_populates="topic",
        cascade="all, delete-orphan",
    )
    dependents = relationship(
        "TopicDependency",
        foreign_keys="TopicDependency.depends_on_topic_id",
        back_populates="depends_on",
        cascade="all, delete-orphan",
    )
    deadlines = relationship("TopicDeadline", back_populates="topic", cascade="all, delete-orphan")
