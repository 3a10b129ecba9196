"""Read helpers for candidate rows."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from pageant_vote.models import Candidate, Category

__all__ = ["CandidateRepository"]


class CandidateRepository:
    """Thin wrapper around database access for candidate entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def find(self, category: Category, candidate_number: int) -> Candidate | None:
        """Return the candidate holding ``candidate_number`` in ``category``."""
        stmt = select(Candidate).where(
            Candidate.category == category,
            Candidate.candidate_number == candidate_number,
        )
        return self.session.scalars(stmt).first()

    def find_many(
        self,
        pairs: Iterable[tuple[Category, int]],
    ) -> dict[tuple[Category, int], Candidate]:
        """Resolve several (category, number) pairs with one query.

        Pairs with no matching candidate are simply absent from the result.
        """
        keys = set(pairs)
        if not keys:
            return {}
        categories = {category for category, _ in keys}
        stmt = select(Candidate).where(Candidate.category.in_(categories))
        return {
            (candidate.category, candidate.candidate_number): candidate
            for candidate in self.session.scalars(stmt)
            if (candidate.category, candidate.candidate_number) in keys
        }

    def list_by_category(self, category: Category) -> list[Candidate]:
        """Return a category's candidates ordered by candidate number."""
        stmt = (
            select(Candidate)
            .where(Candidate.category == category)
            .order_by(Candidate.candidate_number)
        )
        return list(self.session.scalars(stmt))
