"""initial schema

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-19 10:12:44.512830

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create posts and the tables that reference posts by number."""
    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("topic_id", sa.BigInteger(), nullable=False),
        sa.Column("post_number", sa.Integer(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=True),
        sa.Column("reply_to_post_number", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("raw", sa.Text(), nullable=False),
        sa.Column("cooked", sa.Text(), nullable=True),
        sa.Column("like_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_posts_topic_id_post_number",
        "posts",
        ["topic_id", "post_number"],
        unique=True,
        sqlite_where=sa.text("deleted = 0"),
        postgresql_where=sa.text("NOT deleted"),
    )
    op.create_index("ix_posts_topic_id_created_at", "posts", ["topic_id", "created_at"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("notification_type", sa.SmallInteger(), nullable=False),
        sa.Column("topic_id", sa.BigInteger(), nullable=True),
        sa.Column("post_number", sa.Integer(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notifications_topic_id_post_number",
        "notifications",
        ["topic_id", "post_number"],
    )

    op.create_table(
        "post_timings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("topic_id", sa.BigInteger(), nullable=False),
        sa.Column("post_number", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("msecs", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_post_timings_topic_id_post_number_user_id",
        "post_timings",
        ["topic_id", "post_number", "user_id"],
    )

    op.create_table(
        "topic_users",
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("topic_id", sa.BigInteger(), nullable=False),
        sa.Column("last_read_post_number", sa.Integer(), nullable=True),
        sa.Column("last_emailed_post_number", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("user_id", "topic_id"),
    )

    op.create_table(
        "post_actions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("action_type", sa.String(length=32), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_actions_post_id", "post_actions", ["post_id"])


def downgrade() -> None:
    """Drop every table created by upgrade."""
    op.drop_index("ix_post_actions_post_id", table_name="post_actions")
    op.drop_table("post_actions")
    op.drop_table("topic_users")
    op.drop_index("ix_post_timings_topic_id_post_number_user_id", table_name="post_timings")
    op.drop_table("post_timings")
    op.drop_index("ix_notifications_topic_id_post_number", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_posts_topic_id_created_at", table_name="posts")
    op.drop_index("ix_posts_topic_id_post_number", table_name="posts")
    op.drop_table("posts")
