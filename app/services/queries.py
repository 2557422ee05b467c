from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models import Assignment, Signup, Team, TeamUser, Topic, User


def get_assignment(db: Session, assignment_id: int) -> Assignment:
    assignment = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not assignment:
        raise NotFoundError("Assignment", assignment_id)
    return assignment


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User", user_id)
    return user


def get_topic(db: Session, topic_id: int) -> Topic:
    topic = db.query(Topic).filter(Topic.id == topic_id).first()
    if not topic:
        raise NotFoundError("Topic", topic_id)
    return topic


def lock_topic(db: Session, topic_id: int) -> Topic:
    """Load a topic with a row lock held until the transaction ends."""
    topic = db.query(Topic).filter(Topic.id == topic_id).with_for_update().first()
    if not topic:
        raise NotFoundError("Topic", topic_id)
    return topic


def topic_signups(db: Session, topic_id: int) -> List[Signup]:
    return db.query(Signup).filter(Signup.topic_id == topic_id).order_by(Signup.id).all()


def find_team(db: Session, assignment_id: int, user_id: int) -> Optional[Team]:
    return (
        db.query(Team)
        .join(TeamUser, TeamUser.team_id == Team.id)
        .filter(Team.assignment_id == assignment_id, TeamUser.user_id == user_id)
        .first()
    )


def team_signups(db: Session, assignment_id: int, team_id: int) -> List[Signup]:
    return (
        db.query(Signup)
        .join(Topic, Signup.topic_id == Topic.id)
        .filter(Topic.assignment_id == assignment_id, Signup.team_id == team_id)
        .order_by(Signup.id)
        .all()
    )
