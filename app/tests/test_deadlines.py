from datetime import datetime, timedelta

import pytest

from app.core.errors import InvalidDeadlineValue
from app.models import DeadlineType, TopicDeadline
from app.schemas.deadline import RoundDueDates, TopicDeadlineEdit
from app.services.deadlines import (
    deadline_field_name,
    deadline_keys,
    parse_due_date,
    plan_topic_deadlines,
    save_topic_deadlines,
    staggered_deadlines,
)

SUBMIT = datetime(2026, 3, 2, 23, 59)
REVIEW = datetime(2026, 3, 9, 23, 59)
META = datetime(2026, 3, 30, 23, 59)

ASSIGNMENT_DATES = {
    (DeadlineType.submission, 1): SUBMIT,
    (DeadlineType.review, 1): REVIEW,
    (DeadlineType.metareview, None): META,
}


def test_deadline_keys_cover_every_round_then_metareview():
    assert deadline_keys(2) == [
        (DeadlineType.submission, 1),
        (DeadlineType.review, 1),
        (DeadlineType.submission, 2),
        (DeadlineType.review, 2),
        (DeadlineType.metareview, None),
    ]


def test_first_layer_copies_assignment_dates():
    plan = plan_topic_deadlines([[1, 2]], 1, ASSIGNMENT_DATES)
    assert plan.messages == []
    for topic in (1, 2):
        assert plan.deadlines[(topic, DeadlineType.submission, 1)] == SUBMIT
        assert plan.deadlines[(topic, DeadlineType.review, 1)] == REVIEW
        assert plan.deadlines[(topic, DeadlineType.metareview, None)] == META


def test_later_layers_are_staggered_from_the_previous_layer():
    plan = plan_topic_deadlines([[1], [2, 3], [4]], 1, ASSIGNMENT_DATES, days_between_submissions=7)
    assert plan.deadlines[(2, DeadlineType.submission, 1)] == SUBMIT + timedelta(days=7)
    assert plan.deadlines[(3, DeadlineType.review, 1)] == REVIEW + timedelta(days=7)
    assert plan.deadlines[(4, DeadlineType.metareview, None)] == META + timedelta(days=14)


def test_without_offset_every_layer_matches_the_assignment():
    plan = plan_topic_deadlines([[1], [2]], 1, ASSIGNMENT_DATES)
    assert plan.deadlines[(2, DeadlineType.submission, 1)] == SUBMIT


def test_later_existing_deadline_is_not_moved_earlier():
    later = SUBMIT + timedelta(days=3)
    earlier = SUBMIT - timedelta(days=3)
    existing = {
        (1, DeadlineType.submission, 1): later,
        (2, DeadlineType.submission, 1): earlier,
    }
    plan = plan_topic_deadlines([[1, 2]], 1, ASSIGNMENT_DATES, existing)
    assert plan.deadlines[(1, DeadlineType.submission, 1)] == later
    assert plan.deadlines[(2, DeadlineType.submission, 1)] == SUBMIT


def test_missing_assignment_date_is_reported_once_and_skipped():
    plan = plan_topic_deadlines([[1, 2]], 2, ASSIGNMENT_DATES)
    assert (1, DeadlineType.submission, 2) not in plan.deadlines
    assert plan.messages == [
        "No Resubmission deadline 1 is set for the assignment",
        "No Review deadline 1 is set for the assignment",
    ]


@pytest.mark.parametrize(
    "deadline_type, round_no, expected",
    [
        (DeadlineType.submission, 1, "Submission deadline"),
        (DeadlineType.submission, 3, "Resubmission deadline 2"),
        (DeadlineType.review, 1, "Review deadline"),
        (DeadlineType.review, 2, "Review deadline 1"),
        (DeadlineType.metareview, None, "Meta review deadline"),
    ],
)
def test_deadline_field_names(deadline_type, round_no, expected):
    assert deadline_field_name(deadline_type, round_no) == expected


def test_parse_due_date_accepts_form_format_and_iso():
    assert parse_due_date("2026-03-02 23:59:00", "Submission deadline") == SUBMIT
    assert parse_due_date("2026-03-02T23:59:00", "Submission deadline") == SUBMIT


@pytest.mark.parametrize("value", ["", None, "next tuesday", "2026-13-40 10:00:00"])
def test_parse_due_date_rejects_bad_values(value):
    with pytest.raises(InvalidDeadlineValue) as excinfo:
        parse_due_date(value, "Review deadline")
    assert excinfo.value.message == "Please enter a valid Review deadline"


def test_staggered_view_copies_assignment_dates_for_new_topics(db_session, assignment, topics):
    rows = staggered_deadlines(db_session, assignment.id)
    assert [row["topic_name"] for row in rows] == ["Ruby basics", "Rails routing", "Testing with RSpec"]
    first = rows[0]
    assert first["rounds"][0] == {"round": 1, "submission": "2026-03-02 23:59:00", "review": "2026-03-09 23:59:00"}
    assert first["rounds"][1]["submission"] == "2026-03-16 23:59:00"
    assert first["metareview"] == "2026-03-30 23:59:00"
    assert db_session.query(TopicDeadline).count() == 3 * 5


def test_instructor_edits_keep_going_past_invalid_fields(db_session, assignment, topics):
    topic = topics["rails"]
    edit = TopicDeadlineEdit(
        topic_id=topic.id,
        rounds=[
            RoundDueDates(round=1, submission="2026-04-01 12:00:00", review="not a date"),
            RoundDueDates(round=2, submission="2026-04-15 12:00:00", review="2026-04-20 12:00:00"),
        ],
        metareview="",
    )
    result = save_topic_deadlines(db_session, assignment.id, [edit])

    assert result.updated == 3
    assert result.messages == [
        "Please enter a valid Review deadline",
        "Please enter a valid Meta review deadline",
    ]
    deadlines = {
        (d.deadline_type, d.round): d.due_at
        for d in db_session.query(TopicDeadline).filter(TopicDeadline.topic_id == topic.id)
    }
    assert deadlines[(DeadlineType.submission, 1)] == datetime(2026, 4, 1, 12, 0)
    # invalid values leave the copied assignment date in place
    assert deadlines[(DeadlineType.review, 1)] == REVIEW
    assert deadlines[(DeadlineType.metareview, None)] == META
    assert deadlines[(DeadlineType.review, 2)] == datetime(2026, 4, 20, 12, 0)
