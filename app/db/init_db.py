import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models import (
    Assignment,
    AssignmentDueDate,
    DeadlineType,
    Signup,
    SignupStatus,
    Team,
    TeamUser,
    Topic,
    TopicDependency,
    User,
)

logger = logging.getLogger(__name__)


def seed_demo_data(db: Session) -> bool:
    """Load a small staggered assignment; returns False when data already exists."""
    if db.query(Assignment).first():
        return False

    assignment = Assignment(
        name="Wiki textbook",
        staggered_deadline=True,
        review_rounds=2,
        days_between_submissions=7,
    )
    db.add(assignment)
    db.flush()

    db.add_all([
        AssignmentDueDate(assignment_id=assignment.id, deadline_type=DeadlineType.submission, round=1,
                          due_at=datetime(2026, 3, 2, 23, 59)),
        AssignmentDueDate(assignment_id=assignment.id, deadline_type=DeadlineType.review, round=1,
                          due_at=datetime(2026, 3, 9, 23, 59)),
        AssignmentDueDate(assignment_id=assignment.id, deadline_type=DeadlineType.submission, round=2,
                          due_at=datetime(2026, 3, 16, 23, 59)),
        AssignmentDueDate(assignment_id=assignment.id, deadline_type=DeadlineType.review, round=2,
                          due_at=datetime(2026, 3, 23, 23, 59)),
        AssignmentDueDate(assignment_id=assignment.id, deadline_type=DeadlineType.metareview,
                          due_at=datetime(2026, 3, 30, 23, 59)),
    ])

    basics = Topic(assignment_id=assignment.id, topic_identifier="1.1", topic_name="Ruby basics",
                   category="Language", max_choosers=2)
    rails = Topic(assignment_id=assignment.id, topic_identifier="2.1", topic_name="Rails routing",
                  category="Framework", max_choosers=1)
    testing = Topic(assignment_id=assignment.id, topic_identifier="2.2", topic_name="Testing with RSpec",
                    category="Framework", max_choosers=1)
    db.add_all([basics, rails, testing])
    db.flush()

    db.add_all([
        TopicDependency(topic_id=rails.id, depends_on_topic_id=basics.id),
        TopicDependency(topic_id=testing.id, depends_on_topic_id=basics.id),
    ])

    alice = User(name="Alice")
    bob = User(name="Bob")
    carol = User(name="Carol")
    db.add_all([alice, bob, carol])
    db.flush()

    team_a = Team(assignment_id=assignment.id, name="Team_Alice",
                  comments_for_advertisement="Looking for someone who likes testing")
    team_b = Team(assignment_id=assignment.id, name="Team_Bob")
    db.add_all([team_a, team_b])
    db.flush()

    db.add_all([
        TeamUser(team_id=team_a.id, user_id=alice.id),
        TeamUser(team_id=team_a.id, user_id=carol.id),
        TeamUser(team_id=team_b.id, user_id=bob.id),
        Signup(topic_id=rails.id, team_id=team_a.id, status=SignupStatus.confirmed),
        Signup(topic_id=rails.id, team_id=team_b.id, status=SignupStatus.waitlisted),
    ])

    db.commit()
    logger.info(f"Seeded demo assignment {assignment.id}")
    return True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_demo_data(session)
    finally:
        session.close()
