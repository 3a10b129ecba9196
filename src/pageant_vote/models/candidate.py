# src/pageant_vote/models/candidate.py
"""Contest categories and the candidates standing in them."""

from __future__ import annotations

import enum

from sqlalchemy import BigInteger, Enum, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pageant_vote.db.session import Base


class Category(str, enum.Enum):
    """Contest categories; each device gets one vote in each of them."""

    KING = "KING"
    QUEEN = "QUEEN"
    PRINCE = "PRINCE"
    PRINCESS = "PRINCESS"
    COUPLE = "COUPLE"


CategoryType = Enum(
    Category,
    name="category",
    native_enum=False,
    length=20,
    validate_strings=True,
)


class Candidate(Base):
    """A contestant within one category.

    ``vote_count`` is a denormalized tally. It only ever moves through
    ``VoteLedger.increment_candidate_count``, which issues a server-side
    ``vote_count = vote_count + 1``.
    """

    __tablename__ = "candidate"
    __table_args__ = (
        UniqueConstraint("category", "candidate_number", name="uk_candidate_category_number"),
        Index("ix_candidate_category", "category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category: Mapped[Category] = mapped_column(CategoryType, nullable=False)
    candidate_number: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    vote_count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
