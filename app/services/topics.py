import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import SignUpSheetError
from app.models import Signup, SignupStatus, Team, TeamUser, Topic, User
from app.services.queries import get_assignment, get_topic, lock_topic, topic_signups
from app.services.signups import promote_signups
from app.services.waitlist import CapacityChange, reconcile_capacity

logger = logging.getLogger(__name__)


@dataclass
class TopicResult:
    topic: Topic
    promoted: List[int] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)


def change_capacity(db: Session, topic: Topic, requested: int) -> CapacityChange:
    """Reconcile the waitlist with a new capacity; the caller holds the topic lock and commits."""
    signups = topic_signups(db, topic.id)
    change = reconcile_capacity(topic.max_choosers, requested, signups)
    if change.rejected:
        logger.warning(
            f"Topic {topic.id}: capacity change {topic.max_choosers} -> {requested} rejected"
        )
        return change

    promoted = set(change.promoted)
    promote_signups(db, [signup for signup in signups if signup.id in promoted])
    if topic.max_choosers != change.capacity:
        logger.info(f"Topic {topic.id}: capacity {topic.max_choosers} -> {change.capacity}, promoted {change.promoted}")
    topic.max_choosers = change.capacity
    return change


def _result(topic: Topic, change: Optional[CapacityChange], messages: List[str]) -> TopicResult:
    result = TopicResult(topic=topic, messages=messages)
    if change is not None:
        result.promoted = list(change.promoted)
        if change.rejected:
            result.messages.insert(0, change.message)
    return result


def create_topic(db: Session, assignment_id: int, payload) -> TopicResult:
    assignment = get_assignment(db, assignment_id)
    topic = (
        db.query(Topic)
        .filter(Topic.assignment_id == assignment_id, Topic.topic_name == payload.topic_name)
        .with_for_update()
        .first()
    )

    # same name in the same assignment edits the existing topic
    if topic:
        topic.topic_identifier = payload.topic_identifier
        change = change_capacity(db, topic, payload.max_choosers)
        topic.category = payload.category
        db.commit()
        db.refresh(topic)
        return _result(topic, change, [])

    topic = Topic(
        assignment_id=assignment.id,
        topic_name=payload.topic_name,
        topic_identifier=payload.topic_identifier,
        category=payload.category,
        max_choosers=payload.max_choosers,
    )
    if assignment.is_microtask:
        topic.micropayment = payload.micropayment
    db.add(topic)
    db.commit()
    db.refresh(topic)

    logger.info(f"Topic {topic.id} ({topic.topic_name}) created in assignment {assignment.id}")
    return _result(topic, None, [f'Topic: "{topic.topic_name}" has been created successfully.'])


def update_topic(db: Session, topic_id: int, payload) -> TopicResult:
    topic = lock_topic(db, topic_id)
    messages = []

    change = None
    if payload.max_choosers is not None:
        change = change_capacity(db, topic, payload.max_choosers)

    if payload.topic_name is not None and payload.topic_name != topic.topic_name:
        clash = (
            db.query(Topic)
            .filter(Topic.assignment_id == topic.assignment_id, Topic.topic_name == payload.topic_name)
            .first()
        )
        if clash:
            messages.append(f'A topic named "{payload.topic_name}" already exists.')
        else:
            topic.topic_name = payload.topic_name
    if payload.topic_identifier is not None:
        topic.topic_identifier = payload.topic_identifier
    if payload.category is not None:
        topic.category = payload.category
    if payload.micropayment is not None:
        topic.micropayment = payload.micropayment

    db.commit()
    db.refresh(topic)
    messages.append(f'Topic: "{topic.topic_name}" has been updated successfully.')
    return _result(topic, change, messages)


def delete_topic(db: Session, topic_id: int) -> None:
    topic = get_topic(db, topic_id)
    db.delete(topic)
    db.commit()
    logger.info(f"Topic {topic_id} deleted with its signups, dependencies and deadlines")


def add_default_microtask(db: Session, assignment_id: int) -> TopicResult:
    assignment = get_assignment(db, assignment_id)
    exists = (
        db.query(Topic)
        .filter(Topic.assignment_id == assignment.id, Topic.topic_name == "Microtask Topic")
        .first()
    )
    if exists:
        raise SignUpSheetError("The default Microtask topic already exists.")

    topic = Topic(
        assignment_id=assignment.id,
        topic_identifier="MT1",
        topic_name="Microtask Topic",
        max_choosers=0,
        micropayment=0,
    )
    db.add(topic)
    db.commit()
    db.refresh(topic)
    return TopicResult(topic=topic, messages=["Default Microtask topic was created - please update."])


def slot_counts(db: Session, assignment_id: int) -> Dict[int, Dict[SignupStatus, int]]:
    rows = (
        db.query(Signup.topic_id, Signup.status, func.count(Signup.id))
        .join(Topic, Signup.topic_id == Topic.id)
        .filter(Topic.assignment_id == assignment_id)
        .group_by(Signup.topic_id, Signup.status)
        .all()
    )
    counts: Dict[int, Dict[SignupStatus, int]] = {}
    for topic_id, status, count in rows:
        counts.setdefault(topic_id, {})[status] = count
    return counts


def list_topics(db: Session, assignment_id: int) -> List[Dict]:
    get_assignment(db, assignment_id)
    counts = slot_counts(db, assignment_id)
    topics = db.query(Topic).filter(Topic.assignment_id == assignment_id).order_by(Topic.id).all()
    return [
        {
            "topic": topic,
            "slots_filled": counts.get(topic.id, {}).get(SignupStatus.confirmed, 0),
            "slots_waitlisted": counts.get(topic.id, {}).get(SignupStatus.waitlisted, 0),
        }
        for topic in topics
    ]


def topic_advertisements(db: Session, topic_id: int) -> List[Dict]:
    """Teams on a topic with their partner advertisement and members."""
    get_topic(db, topic_id)
    rows = (
        db.query(Team, Signup)
        .join(Signup, Signup.team_id == Team.id)
        .filter(Signup.topic_id == topic_id)
        .order_by(Signup.id)
        .all()
    )

    result = []
    for team, signup in rows:
        members = (
            db.query(User)
            .join(TeamUser, TeamUser.user_id == User.id)
            .filter(TeamUser.team_id == team.id)
            .order_by(User.id)
            .all()
        )
        result.append(
            {
                "team_id": team.id,
                "team_name": team.name,
                "comments_for_advertisement": team.comments_for_advertisement,
                "status": signup.status.value,
                "members": [member.name for member in members],
            }
        )
    return result
