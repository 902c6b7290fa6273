"""Question and answer tables

Revision ID: 5c1f0a7e2b3d
Revises:
Create Date: 2026-10-19 09:12:44.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c1f0a7e2b3d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(), nullable=False, unique=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_global_mod", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("topics_per_page", sa.Integer(), nullable=False, server_default=sa.text("20")),
    )
    op.create_index("ix_users_id", "users", ["id"])

    op.create_table(
        "user_fields",
        sa.Column("uid", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("field", sa.String(), primary_key=True),
        sa.Column("value", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )

    op.create_table(
        "categories",
        sa.Column("cid", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("parent_cid", sa.Integer, sa.ForeignKey("categories.cid"), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )
    op.create_index("ix_categories_cid", "categories", ["cid"])

    op.create_table(
        "category_privileges",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("cid", sa.Integer, sa.ForeignKey("categories.cid", ondelete="CASCADE"), nullable=False),
        sa.Column("privilege", sa.String(), nullable=False),
        sa.Column("uid", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True),
        sa.UniqueConstraint("cid", "privilege", "uid", name="uq_category_privilege"),
    )
    op.create_index("ix_category_privileges_id", "category_privileges", ["id"])
    op.create_index("ix_category_privileges_cid", "category_privileges", ["cid"])

    op.create_table(
        "topics",
        sa.Column("tid", sa.Integer, primary_key=True),
        sa.Column("cid", sa.Integer, sa.ForeignKey("categories.cid"), nullable=False),
        sa.Column("uid", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("main_pid", sa.Integer(), nullable=True),
        sa.Column("locked", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("deleted", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("lastposttime", sa.BigInteger(), nullable=False),
        sa.Column("is_question", sa.Integer(), nullable=True),
        sa.Column("is_solved", sa.Integer(), nullable=True),
        sa.Column("solved_pid", sa.Integer(), nullable=True),
    )
    op.create_index("ix_topics_tid", "topics", ["tid"])
    op.create_index("ix_topics_cid", "topics", ["cid"])

    op.create_table(
        "posts",
        sa.Column("pid", sa.Integer, primary_key=True),
        sa.Column("tid", sa.Integer, sa.ForeignKey("topics.tid", ondelete="CASCADE"), nullable=False),
        sa.Column("uid", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("votes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("deleted", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
    )
    op.create_index("ix_posts_pid", "posts", ["pid"])
    op.create_index("ix_posts_tid", "posts", ["tid"])

    op.create_table(
        "sorted_set_entries",
        sa.Column("key", sa.String(), primary_key=True),
        sa.Column("value", sa.Integer(), primary_key=True),
        sa.Column("score", sa.Float(), nullable=False),
    )
    op.create_index("ix_sorted_set_entries_score", "sorted_set_entries", ["score"])

    op.create_table(
        "topic_events",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("tid", sa.Integer, sa.ForeignKey("topics.tid", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("uid", sa.Integer(), nullable=True),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
    )
    op.create_index("ix_topic_events_id", "topic_events", ["id"])
    op.create_index("ix_topic_events_tid", "topic_events", ["tid"])

    op.create_table(
        "settings_hashes",
        sa.Column("name", sa.String(), primary_key=True),
        sa.Column("field", sa.String(), primary_key=True),
        sa.Column("value", sa.String(), nullable=True),
    )

    op.create_table(
        "rewards",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("condition", sa.String(), nullable=False),
        sa.Column("threshold", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("claimable", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("reward_name", sa.String(), nullable=False),
    )
    op.create_index("ix_rewards_id", "rewards", ["id"])
    op.create_index("ix_rewards_condition", "rewards", ["condition"])

    op.create_table(
        "reward_claims",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("reward_id", sa.Integer, sa.ForeignKey("rewards.id", ondelete="CASCADE"), nullable=False),
        sa.Column("uid", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
    )
    op.create_index("ix_reward_claims_id", "reward_claims", ["id"])
    op.create_index("ix_reward_claims_reward_id", "reward_claims", ["reward_id"])
    op.create_index("ix_reward_claims_uid", "reward_claims", ["uid"])


def downgrade():
    for table in (
        "reward_claims", "rewards", "settings_hashes", "topic_events", "sorted_set_entries",
        "posts", "topics", "category_privileges", "categories", "user_fields", "users",
    ):
        op.drop_table(table)
