"""engagement schema

Revision ID: 3c1f9a2b7d40
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create accounts, offices, reviews, both vote ledgers and notifications."""
    op.create_table(
        "office",
        sa.Column("office_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("office_type", sa.Text(), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("upvote_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvote_count", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("upvote_count >= 0", name="ck_office_upvote_count"),
        sa.CheckConstraint("downvote_count >= 0", name="ck_office_downvote_count"),
        sa.PrimaryKeyConstraint("office_id"),
    )
    op.create_table(
        "user_account",
        sa.Column("user_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("role", sa.Text(), nullable=False, server_default="citizen"),
        sa.Column("office_id", sa.Integer(), nullable=True),
        sa.CheckConstraint(
            "role IN ('citizen', 'official', 'admin')", name="ck_user_account_role"
        ),
        sa.ForeignKeyConstraint(["office_id"], ["office.office_id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "review",
        sa.Column("review_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("office_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.SmallInteger(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="approved"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'flagged', 'removed', 'resolved')",
            name="ck_review_status",
        ),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.user_id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["office_id"], ["office.office_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("review_id"),
    )
    op.create_index("ix_review_office_id", "review", ["office_id"])
    op.create_index("ix_review_status", "review", ["status"])

    op.create_table(
        "review_vote",
        sa.Column("vote_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("review_id", sa.Integer(), nullable=False),
        sa.Column("vote_type", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "vote_type IN ('helpful', 'not_helpful', 'flag')", name="ck_review_vote_type"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.user_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["review_id"], ["review.review_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("vote_id"),
        sa.UniqueConstraint("user_id", "review_id", name="uq_review_vote_user_review"),
    )
    op.create_index(
        "ix_review_vote_review_id_type", "review_vote", ["review_id", "vote_type"]
    )

    op.create_table(
        "office_vote",
        sa.Column("vote_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("office_id", sa.Integer(), nullable=False),
        sa.Column("vote_type", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_office_vote_type"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.user_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["office_id"], ["office.office_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("vote_id"),
        sa.UniqueConstraint("user_id", "office_id", name="uq_office_vote_user_office"),
    )
    op.create_index(
        "ix_office_vote_office_id_type", "office_vote", ["office_id", "vote_type"]
    )
    op.create_index("ix_office_vote_created_at", "office_vote", ["created_at"])

    op.create_table(
        "notification",
        sa.Column("notification_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False, server_default="info"),
        sa.Column("related_entity_type", sa.Text(), nullable=True),
        sa.Column("related_entity_id", sa.Integer(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "type IN ('info', 'warning', 'success', 'error')", name="ck_notification_type"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.user_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("notification_id"),
    )
    op.create_index(
        "ix_notification_user_id_is_read", "notification", ["user_id", "is_read"]
    )


def downgrade() -> None:
    """Drop every engagement table."""
    op.drop_index("ix_notification_user_id_is_read", table_name="notification")
    op.drop_table("notification")
    op.drop_index("ix_office_vote_created_at", table_name="office_vote")
    op.drop_index("ix_office_vote_office_id_type", table_name="office_vote")
    op.drop_table("office_vote")
    op.drop_index("ix_review_vote_review_id_type", table_name="review_vote")
    op.drop_table("review_vote")
    op.drop_index("ix_review_status", table_name="review")
    op.drop_index("ix_review_office_id", table_name="review")
    op.drop_table("review")
    op.drop_table("user_account")
    op.drop_table("office")
