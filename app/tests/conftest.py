import os
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings
from app.db.base import Base
from app.api.deps import get_db
from app.models import (
    Assignment,
    AssignmentDueDate,
    DeadlineType,
    Signup,
    SignupStatus,
    Team,
    TeamUser,
    Topic,
    User,
)


@pytest.fixture(scope="session")
def db_engine(tmp_path_factory):
    data_dir = tmp_path_factory.mktemp("data")
    os.environ["DATABASE_URL"] = f"sqlite:///{data_dir / 'test.db'}"
    os.environ["GRAPH_OUTPUT_DIR"] = str(data_dir / "graphs")
    get_settings.cache_clear()
    settings = get_settings()
    engine = create_engine(settings.database_url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture()
def db_session(db_engine):
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = session_local()
    try:
        yield db
    finally:
        db.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from app.main import app

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def assignment(db_session):
    assignment = Assignment(name="Wiki textbook", staggered_deadline=True, review_rounds=2)
    db_session.add(assignment)
    db_session.flush()
    db_session.add_all([
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
    db_session.commit()
    return assignment


@pytest.fixture()
def topics(db_session, assignment):
    basics = Topic(assignment_id=assignment.id, topic_identifier="1.1", topic_name="Ruby basics", max_choosers=2)
    rails = Topic(assignment_id=assignment.id, topic_identifier="2.1", topic_name="Rails routing", max_choosers=2)
    testing = Topic(assignment_id=assignment.id, topic_identifier="2.2", topic_name="Testing with RSpec",
                    max_choosers=1)
    db_session.add_all([basics, rails, testing])
    db_session.commit()
    return {"basics": basics, "rails": rails, "testing": testing}


@pytest.fixture()
def users(db_session):
    people = [User(name=name) for name in ("Alice", "Bob", "Carol", "Dave", "Erin")]
    db_session.add_all(people)
    db_session.commit()
    return people


def add_team_signup(db, assignment, user, topic, status):
    team = Team(assignment_id=assignment.id, name=f"Team_{user.name}")
    db.add(team)
    db.flush()
    db.add(TeamUser(team_id=team.id, user_id=user.id))
    signup = Signup(topic_id=topic.id, team_id=team.id, status=status)
    db.add(signup)
    db.commit()
    return signup


@pytest.fixture()
def full_topic(db_session, assignment, topics, users):
    """Rails routing, capacity 2: Alice and Bob confirmed, Carol and Dave waitlisted."""
    rails = topics["rails"]
    signups = [
        add_team_signup(db_session, assignment, users[0], rails, SignupStatus.confirmed),
        add_team_signup(db_session, assignment, users[1], rails, SignupStatus.confirmed),
        add_team_signup(db_session, assignment, users[2], rails, SignupStatus.waitlisted),
        add_team_signup(db_session, assignment, users[3], rails, SignupStatus.waitlisted),
    ]
    return rails, signups
