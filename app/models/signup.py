import enum
from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class SignupStatus(str, enum.Enum):
    confirmed = "confirmed"
    waitlisted = "waitlisted"


class Signup(Base):
    __tablename__ = "signups"
    __table_args__ = (UniqueConstraint("topic_id", "team_id", name="uq_signups_topic_team"),)

    # waitlist order is ascending id
    id = Column(Integer, primary_key=True)
    topic_id = Column(Integer, ForeignKey("sign_up_topics.id"), nullable=False)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    status = Column(Enum(SignupStatus, name="signup_status"), nullable=False)
    preference_priority = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    topic = relationship("Topic", back_populates="signups")
    team = relationship("Team", back_populates="signups")
