import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import InvalidDeadlineValue, NotFoundError
from app.models import Assignment, DeadlineType, TopicDeadline
from app.services.queries import get_assignment

logger = logging.getLogger(__name__)

DeadlineKey = Tuple[DeadlineType, Optional[int]]


@dataclass
class DeadlinePlan:
    # (topic, deadline type, round) -> due date
    deadlines: Dict[Tuple[Any, DeadlineType, Optional[int]], datetime] = field(default_factory=dict)
    messages: List[str] = field(default_factory=list)


@dataclass
class DeadlineEditResult:
    updated: int = 0
    messages: List[str] = field(default_factory=list)


def deadline_keys(review_rounds: int) -> List[DeadlineKey]:
    keys: List[DeadlineKey] = []
    for round_no in range(1, review_rounds + 1):
        keys.append((DeadlineType.submission, round_no))
        keys.append((DeadlineType.review, round_no))
    keys.append((DeadlineType.metareview, None))
    return keys


def deadline_field_name(deadline_type: DeadlineType, round_no: Optional[int]) -> str:
    if deadline_type == DeadlineType.metareview:
        return "Meta review deadline"
    if deadline_type == DeadlineType.submission:
        return "Submission deadline" if round_no == 1 else f"Resubmission deadline {round_no - 1}"
    return "Review deadline" if round_no == 1 else f"Review deadline {round_no - 1}"


def parse_due_date(value: Any, field_name: str, fmt: Optional[str] = None) -> datetime:
    if isinstance(value, datetime):
        return value
    if value is None or not str(value).strip():
        raise InvalidDeadlineValue(field_name, value)

    text = str(value).strip()
    try:
        return datetime.strptime(text, fmt or get_settings().due_date_format)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidDeadlineValue(field_name, value) from exc


def plan_topic_deadlines(
    layers: List[List[Any]],
    review_rounds: int,
    assignment_due_dates: Dict[DeadlineKey, datetime],
    existing: Optional[Dict[Tuple[Any, DeadlineType, Optional[int]], datetime]] = None,
    days_between_submissions: int = 0,
) -> DeadlinePlan:
    """Work out every topic's deadlines layer by layer.

    The first layer copies the assignment's own due dates. Each later layer
    starts from the deadlines planned for the first topic of the layer before
    it, shifted by ``days_between_submissions``. A stored deadline that is
    already later than the computed one is kept.
    """
    existing = existing or {}
    offset = timedelta(days=days_between_submissions or 0)
    plan = DeadlinePlan()

    previous_topic = None
    for layer in layers:
        for topic in layer:
            for deadline_type, round_no in deadline_keys(review_rounds):
                if previous_topic is None:
                    base = assignment_due_dates.get((deadline_type, round_no))
                else:
                    base = plan.deadlines.get((previous_topic, deadline_type, round_no))
                    if base is not None:
                        base = base + offset

                current = existing.get((topic, deadline_type, round_no))
                if base is None and current is None:
                    message = f"No {deadline_field_name(deadline_type, round_no)} is set for the assignment"
                    if message not in plan.messages:
                        plan.messages.append(message)
                    continue

                if current is not None and (base is None or current > base):
                    plan.deadlines[(topic, deadline_type, round_no)] = current
                else:
                    plan.deadlines[(topic, deadline_type, round_no)] = base
        if layer:
            previous_topic = layer[0]
    return plan


def assignment_due_date_map(assignment: Assignment) -> Dict[DeadlineKey, datetime]:
    result = {}
    for due_date in assignment.due_dates:
        round_no = None if due_date.deadline_type == DeadlineType.metareview else due_date.round
        result[(due_date.deadline_type, round_no)] = due_date.due_at
    return result


def find_topic_deadline(
    db: Session, topic_id: int, deadline_type: DeadlineType, round_no: Optional[int]
) -> Optional[TopicDeadline]:
    query = db.query(TopicDeadline).filter(
        TopicDeadline.topic_id == topic_id,
        TopicDeadline.deadline_type == deadline_type,
    )
    if round_no is None:
        query = query.filter(TopicDeadline.round.is_(None))
    else:
        query = query.filter(TopicDeadline.round == round_no)
    return query.first()


def find_or_create_topic_deadline(
    db: Session,
    topic_id: int,
    deadline_type: DeadlineType,
    round_no: Optional[int],
    default_due_at: Optional[datetime],
) -> Optional[TopicDeadline]:
    deadline = find_topic_deadline(db, topic_id, deadline_type, round_no)
    if deadline is None and default_due_at is not None:
        deadline = TopicDeadline(
            topic_id=topic_id,
            deadline_type=deadline_type,
            round=round_no,
            due_at=default_due_at,
        )
        db.add(deadline)
        db.flush()
    return deadline


def existing_topic_deadlines(db: Session, topic_ids: Iterable[int]):
    topic_ids = list(topic_ids)
    if not topic_ids:
        return {}
    rows = db.query(TopicDeadline).filter(TopicDeadline.topic_id.in_(topic_ids)).all()
    return {(row.topic_id, row.deadline_type, row.round): row.due_at for row in rows}


def assign_deadlines(db: Session, assignment: Assignment, layers: List[List[int]]) -> DeadlinePlan:
    topic_ids = [topic_id for layer in layers for topic_id in layer]
    plan = plan_topic_deadlines(
        layers,
        assignment.review_rounds,
        assignment_due_date_map(assignment),
        existing_topic_deadlines(db, topic_ids),
        assignment.days_between_submissions,
    )

    for (topic_id, deadline_type, round_no), due_at in plan.deadlines.items():
        deadline = find_topic_deadline(db, topic_id, deadline_type, round_no)
        if deadline is None:
            db.add(TopicDeadline(topic_id=topic_id, deadline_type=deadline_type, round=round_no, due_at=due_at))
        else:
            deadline.due_at = due_at
    db.flush()

    logger.info(
        f"Assigned {len(plan.deadlines)} topic deadlines across {len(layers)} layers "
        f"for assignment {assignment.id}"
    )
    return plan


def save_topic_deadlines(db: Session, assignment_id: int, edits) -> DeadlineEditResult:
    """Apply instructor edits; a bad date is reported and skipped, the rest still saves."""
    assignment = get_assignment(db, assignment_id)
    topic_ids = {topic.id for topic in assignment.topics}
    for edit in edits:
        if edit.topic_id not in topic_ids:
            raise NotFoundError("Topic", edit.topic_id)

    defaults = assignment_due_date_map(assignment)
    result = DeadlineEditResult()
    for edit in edits:
        supplied = {entry.round: entry for entry in edit.rounds}
        values = []
        for round_no in range(1, assignment.review_rounds + 1):
            entry = supplied.get(round_no)
            values.append((DeadlineType.submission, round_no, entry.submission if entry else None))
            values.append((DeadlineType.review, round_no, entry.review if entry else None))
        values.append((DeadlineType.metareview, None, edit.metareview))

        for deadline_type, round_no, raw in values:
            # fields left out of the form keep their stored value
            if raw is None:
                continue
            deadline = find_or_create_topic_deadline(
                db, edit.topic_id, deadline_type, round_no, defaults.get((deadline_type, round_no))
            )
            try:
                due_at = parse_due_date(raw, deadline_field_name(deadline_type, round_no))
            except InvalidDeadlineValue as error:
                logger.warning(f"Topic {edit.topic_id}: rejected {error.field} value {raw!r}")
                if error.message not in result.messages:
                    result.messages.append(error.message)
                continue

            if deadline is None:
                db.add(TopicDeadline(topic_id=edit.topic_id, deadline_type=deadline_type, round=round_no, due_at=due_at))
            else:
                deadline.due_at = due_at
            result.updated += 1

    db.commit()
    return result


def staggered_deadlines(db: Session, assignment_id: int) -> List[Dict]:
    """Per-topic deadline table; topics without deadlines get the assignment's copied in."""
    assignment = get_assignment(db, assignment_id)
    fmt = get_settings().due_date_format
    defaults = assignment_due_date_map(assignment)

    def formatted(deadline: Optional[TopicDeadline]) -> Optional[str]:
        return deadline.due_at.strftime(fmt) if deadline else None

    rows = []
    for topic in sorted(assignment.topics, key=lambda t: t.id):
        rounds = []
        for round_no in range(1, assignment.review_rounds + 1):
            submission = find_or_create_topic_deadline(
                db, topic.id, DeadlineType.submission, round_no, defaults.get((DeadlineType.submission, round_no))
            )
            review = find_or_create_topic_deadline(
                db, topic.id, DeadlineType.review, round_no, defaults.get((DeadlineType.review, round_no))
            )
            rounds.append({"round": round_no, "submission": formatted(submission), "review": formatted(review)})
        metareview = find_or_create_topic_deadline(
            db, topic.id, DeadlineType.metareview, None, defaults.get((DeadlineType.metareview, None))
        )
        rows.append(
            {
                "topic_id": topic.id,
                "topic_identifier": topic.topic_identifier,
                "topic_name": topic.topic_name,
                "rounds": rounds,
                "metareview": formatted(metareview),
            }
        )
    db.commit()
    return rows
