"""sign-up sheet schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


deadline_type_enum = sa.Enum("submission", "review", "metareview", name="deadline_type")
signup_status_enum = sa.Enum("confirmed", "waitlisted", name="signup_status")


def upgrade() -> None:
    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("staggered_deadline", sa.Boolean(), nullable=False),
        sa.Column("review_rounds", sa.Integer(), nullable=False),
        sa.Column("is_microtask", sa.Boolean(), nullable=False),
        sa.Column("days_between_submissions", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "assignment_due_dates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("assignment_id", sa.Integer(), sa.ForeignKey("assignments.id"), nullable=False),
        sa.Column("deadline_type", deadline_type_enum, nullable=False),
        sa.Column("round", sa.Integer(), nullable=True),
        sa.Column("due_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
    )

    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("assignment_id", sa.Integer(), sa.ForeignKey("assignments.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("comments_for_advertisement", sa.String(), nullable=True),
    )

    op.create_table(
        "teams_users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.UniqueConstraint("team_id", "user_id", name="uq_teams_users"),
    )

    op.create_table(
        "sign_up_topics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("assignment_id", sa.Integer(), sa.ForeignKey("assignments.id"), nullable=False),
        sa.Column("topic_name", sa.String(), nullable=False),
        sa.Column("topic_identifier", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("max_choosers", sa.Integer(), nullable=False),
        sa.Column("micropayment", sa.Numeric(10, 2), nullable=True),
        sa.UniqueConstraint("assignment_id", "topic_name", name="uq_sign_up_topics_assignment_name"),
    )

    op.create_table(
        "signups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("topic_id", sa.Integer(), sa.ForeignKey("sign_up_topics.id"), nullable=False),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("status", signup_status_enum, nullable=False),
        sa.Column("preference_priority", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("topic_id", "team_id", name="uq_signups_topic_team"),
    )

    op.create_table(
        "topic_dependencies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("topic_id", sa.Integer(), sa.ForeignKey("sign_up_topics.id"), nullable=False),
        sa.Column("depends_on_topic_id", sa.Integer(), sa.ForeignKey("sign_up_topics.id"), nullable=False),
        sa.UniqueConstraint("topic_id", "depends_on_topic_id", name="uq_topic_dependencies_pair"),
    )

    op.create_table(
        "topic_deadlines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("topic_id", sa.Integer(), sa.ForeignKey("sign_up_topics.id"), nullable=False),
        sa.Column("deadline_type", deadline_type_enum, nullable=False),
        sa.Column("round", sa.Integer(), nullable=True),
        sa.Column("due_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("topic_id", "deadline_type", "round", name="uq_topic_deadlines_topic_type_round"),
    )


def downgrade() -> None:
    op.drop_table("topic_deadlines")
    op.drop_table("topic_dependencies")
    op.drop_table("signups")
    op.drop_table("sign_up_topics")
    op.drop_table("teams_users")
    op.drop_table("teams")
    op.drop_table("users")
    op.drop_table("assignment_due_dates")
    op.drop_table("assignments")

    signup_status_enum.drop(op.get_bind(), checkfirst=True)
    deadline_type_enum.drop(op.get_bind(), checkfirst=True)
