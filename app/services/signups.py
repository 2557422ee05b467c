import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidPriorityValue, NotFoundError, SignupRejected
from app.models import Signup, SignupStatus, Team, TeamUser
from app.services.queries import (
    find_team,
    get_assignment,
    get_user,
    lock_topic,
    team_signups,
    topic_signups,
)
from app.services.waitlist import admission_status, confirmed_count, fill_open_slots

logger = logging.getLogger(__name__)


@dataclass
class SignupResult:
    signup: Optional[Signup] = None
    promoted: List[int] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)


def parse_priority(value: Any) -> int:
    try:
        priority = int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidPriorityValue(value) from exc
    if priority <= 0:
        raise InvalidPriorityValue(value)
    return priority


def drop_other_waitlists(db: Session, signup: Signup) -> None:
    """A team holds one confirmed topic; its other waitlist places are released."""
    others = [
        other
        for other in team_signups(db, signup.topic.assignment_id, signup.team_id)
        if other.id != signup.id and other.status == SignupStatus.waitlisted
    ]
    for other in others:
        db.delete(other)
    if others:
        logger.info(f"Team {signup.team_id} left {len(others)} waitlist(s) after confirming topic {signup.topic_id}")


def promote_signups(db: Session, signups: List[Signup]) -> List[int]:
    promoted = []
    for signup in signups:
        signup.status = SignupStatus.confirmed
        drop_other_waitlists(db, signup)
        promoted.append(signup.id)
        logger.info(f"Team {signup.team_id} promoted from waitlist on topic {signup.topic_id}")
    db.flush()
    return promoted


def find_or_create_team(db: Session, assignment_id: int, user_id: int) -> Team:
    team = find_team(db, assignment_id, user_id)
    if team:
        return team
    user = get_user(db, user_id)
    team = Team(assignment_id=assignment_id, name=f"Team_{user.name}")
    db.add(team)
    db.flush()
    db.add(TeamUser(team_id=team.id, user_id=user.id))
    db.flush()
    logger.info(f"Created team {team.id} for user {user.id} in assignment {assignment_id}")
    return team


def _check_can_sign_up(existing: List[Signup], topic_id: int) -> None:
    if any(signup.topic_id == topic_id for signup in existing):
        raise SignupRejected("You have already signed up for this topic.")
    if any(signup.status == SignupStatus.confirmed for signup in existing):
        raise SignupRejected("You already hold a confirmed topic. Drop it before choosing another one.")


def signup_team(db: Session, assignment_id: int, user_id: int, topic_id: int) -> SignupResult:
    get_assignment(db, assignment_id)
    topic = lock_topic(db, topic_id)
    if topic.assignment_id != assignment_id:
        raise NotFoundError("Topic", topic_id)

    team = find_or_create_team(db, assignment_id, user_id)
    try:
        _check_can_sign_up(team_signups(db, assignment_id, team.id), topic.id)
    except SignupRejected as error:
        logger.warning(f"Signup of team {team.id} for topic {topic.id} rejected: {error.message}")
        db.commit()
        return SignupResult(messages=[error.message])

    status = admission_status(topic.max_choosers, confirmed_count(topic_signups(db, topic.id)))
    signup = Signup(topic_id=topic.id, team_id=team.id, status=status)
    db.add(signup)
    db.flush()
    if status == SignupStatus.confirmed:
        drop_other_waitlists(db, signup)
    db.commit()
    db.refresh(signup)

    logger.info(f"Team {team.id} signed up for topic {topic.id} as {status.value}")
    return SignupResult(signup=signup)


def drop_signup(db: Session, assignment_id: int, user_id: int, topic_id: int) -> SignupResult:
    topic = lock_topic(db, topic_id)
    team = find_team(db, assignment_id, user_id)
    if not team:
        raise NotFoundError("Team", user_id)

    signup = db.query(Signup).filter(Signup.topic_id == topic.id, Signup.team_id == team.id).first()
    if not signup:
        raise NotFoundError("Signup", topic_id)

    was_confirmed = signup.status == SignupStatus.confirmed
    db.delete(signup)
    db.flush()

    promoted = []
    if was_confirmed:
        remaining = topic_signups(db, topic.id)
        ids = set(fill_open_slots(topic.max_choosers, remaining))
        promoted = promote_signups(db, [s for s in remaining if s.id in ids])
    db.commit()

    logger.info(f"Team {team.id} dropped topic {topic.id}; promoted {promoted}")
    return SignupResult(promoted=promoted)


def set_priority(db: Session, assignment_id: int, user_id: int, topic_id: int, priority: Any) -> SignupResult:
    team = find_team(db, assignment_id, user_id)
    if not team:
        raise NotFoundError("Team", user_id)
    signup = db.query(Signup).filter(Signup.topic_id == topic_id, Signup.team_id == team.id).first()
    if not signup:
        raise NotFoundError("Signup", topic_id)

    try:
        value = parse_priority(priority)
    except InvalidPriorityValue as error:
        logger.warning(f"Team {team.id}: invalid priority {priority!r} for topic {topic_id}")
        return SignupResult(signup=signup, messages=[error.message])

    taken = [
        other
        for other in team_signups(db, assignment_id, team.id)
        if other.id != signup.id and other.preference_priority == value
    ]
    if taken:
        return SignupResult(signup=signup, messages=[f"Priority {value} is already used by another topic."])

    signup.preference_priority = value
    db.commit()
    db.refresh(signup)
    return SignupResult(signup=signup)


def user_signups(db: Session, assignment_id: int, user_id: int) -> List[Signup]:
    team = find_team(db, assignment_id, user_id)
    if not team:
        return []
    return team_signups(db, assignment_id, team.id)
