from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), nullable=False)
    name = Column(String, nullable=False)
    comments_for_advertisement = Column(String, nullable=True)

    assignment = relationship("Assignment", back_populates="teams")
    members = relationship("TeamUser", back_populates="team", cascade="all, delete-orphan")
    signups = relationship("Signup", back_populates="team", cascade="all, delete-orphan")


class TeamUser(Base):
    __tablename__ = "teams_users"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_teams_users"),)

    id = Column(Integer, primary_key=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    team = relationship("Team", back_populates="members")
    user = relationship("User", back_populates="team_links")
