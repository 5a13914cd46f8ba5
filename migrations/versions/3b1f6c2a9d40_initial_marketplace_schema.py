"""initial marketplace schema

Revision ID: 3b1f6c2a9d40
Revises:
Create Date: 2026-10-19 10:12:41.503218

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3b1f6c2a9d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(12, 2)


def upgrade() -> None:
    """Create accounts, beats, ratings, ledger and comments."""
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("photo_ref", sa.Text(), nullable=False),
        sa.Column("balance", MONEY, nullable=False),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("balance >= 0", name="ck_user_account_balance_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_account_username", "user_account", ["username"], unique=True)

    op.create_table(
        "beat",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("author_display_name", sa.String(length=200), nullable=False),
        sa.Column("price", MONEY, nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_ref", sa.Text(), nullable=False),
        sa.Column("audio_ref", sa.Text(), nullable=False),
        sa.Column("owner_user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("price >= 0", name="ck_beat_price_non_negative"),
        sa.ForeignKeyConstraint(["owner_user_id"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_beat_created_at", "beat", ["created_at"])
    op.create_index("ix_beat_owner_user_id", "beat", ["owner_user_id"])

    op.create_table(
        "beat_tag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("beat_id", sa.Integer(), nullable=False),
        sa.Column("tag", sa.String(length=64), nullable=False),
        sa.ForeignKeyConstraint(["beat_id"], ["beat.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("beat_id", "tag", name="uq_beat_tag_beat_tag"),
    )
    op.create_index("ix_beat_tag_beat_id", "beat_tag", ["beat_id"])

    op.create_table(
        "rating",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("beat_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("value", sa.SmallInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("value BETWEEN 1 AND 5", name="ck_rating_value_range"),
        sa.ForeignKeyConstraint(["beat_id"], ["beat.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("beat_id", "user_id", name="uq_rating_beat_user"),
    )
    op.create_index("ix_rating_beat_id", "rating", ["beat_id"])
    op.create_index("ix_rating_user_id", "rating", ["user_id"])

    op.create_table(
        "purchase_transaction",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("beat_id", sa.Integer(), nullable=False),
        sa.Column("buyer_user_id", sa.Integer(), nullable=False),
        sa.Column("seller_user_id", sa.Integer(), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("commission", MONEY, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["beat_id"], ["beat.id"]),
        sa.ForeignKeyConstraint(["buyer_user_id"], ["user_account.id"]),
        sa.ForeignKeyConstraint(["seller_user_id"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "beat_id", "buyer_user_id", name="uq_purchase_transaction_beat_buyer"
        ),
    )
    op.create_index(
        "ix_purchase_transaction_buyer_user_id", "purchase_transaction", ["buyer_user_id"]
    )
    op.create_index("ix_purchase_transaction_seller", "purchase_transaction", ["seller_user_id"])

    op.create_table(
        "comment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("beat_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("author_username", sa.String(length=64), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["beat_id"], ["beat.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comment_beat_id", "comment", ["beat_id"])


def downgrade() -> None:
    """Drop every marketplace table."""
    op.drop_table("comment")
    op.drop_table("purchase_transaction")
    op.drop_table("rating")
    op.drop_table("beat_tag")
    op.drop_table("beat")
    op.drop_table("user_account")
