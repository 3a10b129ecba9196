# src/pageant_vote/models/vote.py
"""The vote ledger table."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pageant_vote.db.session import Base
from pageant_vote.db.time import utcnow

from .candidate import Category, CategoryType

VOTE_UNIQUE_CONSTRAINT = "uk_vote_voter_category"


class Vote(Base):
    """A single, immutable ballot entry linking a voter to a candidate.

    ``uk_vote_voter_category`` is the authoritative guard against a device
    voting twice in a category; application pre-checks only make the
    collision rarer.
    """

    __tablename__ = "vote"
    __table_args__ = (
        UniqueConstraint("voter_id", "category", name=VOTE_UNIQUE_CONSTRAINT),
        Index("ix_vote_category", "category"),
        Index("ix_vote_candidate_id", "candidate_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    voter_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("voter.id"),
        nullable=False,
    )
    candidate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("candidate.id"),
        nullable=False,
    )
    category: Mapped[Category] = mapped_column(CategoryType, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
