"""initial voting schema

Revision ID: 3f9c2a1d7b40
Revises:
Create Date: 2025-11-03 09:12:41.512204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f9c2a1d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CATEGORY = sa.Enum(
    "KING", "QUEEN", "PRINCE", "PRINCESS", "COUPLE",
    name="category",
    native_enum=False,
    length=20,
)


def upgrade() -> None:
    """Create candidate, voter and vote tables with their uniqueness guarantees."""
    op.create_table(
        "candidate",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category", CATEGORY, nullable=False),
        sa.Column("candidate_number", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("vote_count", sa.BigInteger(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("category", "candidate_number", name="uk_candidate_category_number"),
    )
    op.create_index("ix_candidate_category", "candidate", ["category"])

    op.create_table(
        "voter",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("pin", sa.String(length=16), nullable=False),
        sa.Column("device_id", sa.String(length=255), nullable=False),
        sa.Column("has_voted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("voted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("device_id", name="uk_voter_device_id"),
    )
    op.create_index("ix_voter_pin", "voter", ["pin"])
    op.create_index("ix_voter_has_voted", "voter", ["has_voted"])

    # uk_vote_voter_category is what makes concurrent duplicate votes impossible;
    # without it the application pre-checks alone would race.
    op.create_table(
        "vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("voter_id", sa.Integer(), nullable=False),
        sa.Column("candidate_id", sa.Integer(), nullable=False),
        sa.Column("category", CATEGORY, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["voter_id"], ["voter.id"]),
        sa.ForeignKeyConstraint(["candidate_id"], ["candidate.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("voter_id", "category", name="uk_vote_voter_category"),
    )
    op.create_index("ix_vote_category", "vote", ["category"])
    op.create_index("ix_vote_candidate_id", "vote", ["candidate_id"])


def downgrade() -> None:
    """Drop the voting tables."""
    op.drop_index("ix_vote_candidate_id", table_name="vote")
    op.drop_index("ix_vote_category", table_name="vote")
    op.drop_table("vote")
    op.drop_index("ix_voter_has_voted", table_name="voter")
    op.drop_index("ix_voter_pin", table_name="voter")
    op.drop_table("voter")
    op.drop_index("ix_candidate_category", table_name="candidate")
    op.drop_table("candidate")
