"""Vote ledger: inserts, existence checks and counter increments."""
from __future__ import annotations

from sqlalchemy import exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pageant_vote.core.errors import DuplicateVote
from pageant_vote.db.errors import is_unique_violation
from pageant_vote.db.time import utcnow
from pageant_vote.models import VOTE_UNIQUE_CONSTRAINT, Candidate, Category, Vote, Voter

__all__ = ["VoteLedger"]

_VOTE_COLUMNS = ("vote.voter_id", "vote.category")


class VoteLedger:
    """Thin wrapper around the ``vote`` table and the candidate tallies.

    Nothing here commits; the caller owns the unit of work.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the ledger with a SQLAlchemy session."""
        self.session = session

    def has_voted(self, voter: Voter, category: Category) -> bool:
        """Return True if the voter already holds a vote in ``category``."""
        stmt = select(
            exists().where(Vote.voter_id == voter.id, Vote.category == category)
        )
        return bool(self.session.scalar(stmt))

    def voted_categories(self, voter: Voter) -> set[Category]:
        """Return the categories in which the voter already voted."""
        stmt = select(Vote.category).where(Vote.voter_id == voter.id)
        return set(self.session.scalars(stmt))

    def has_any_vote(self, voter: Voter) -> bool:
        """Return True if the voter holds a vote in any category."""
        return bool(self.session.scalar(select(exists().where(Vote.voter_id == voter.id))))

    def record_vote(self, voter: Voter, candidate: Candidate, category: Category) -> Vote:
        """Insert a vote row and flush it so constraint violations surface here.

        Raises:
            DuplicateVote: If ``uk_vote_voter_category`` rejects the insert.
        """
        vote = Vote(voter_id=voter.id, candidate_id=candidate.id, category=category)
        self.session.add(vote)
        try:
            self.session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc, VOTE_UNIQUE_CONSTRAINT, _VOTE_COLUMNS):
                raise DuplicateVote(category) from exc
            raise
        return vote

    def increment_candidate_count(self, candidate_id: int) -> None:
        """Bump a candidate's tally with a single server-side update."""
        self.session.execute(
            update(Candidate)
            .where(Candidate.id == candidate_id)
            .values(vote_count=Candidate.vote_count + 1)
            .execution_options(synchronize_session=False)
        )

    def mark_voted(self, voter: Voter) -> bool:
        """Flag the voter as having voted, stamping the first-vote time once.

        Returns:
            True if this call flipped the flag, False if it was already set.
        """
        result = self.session.execute(
            update(Voter)
            .where(Voter.id == voter.id, Voter.has_voted.is_(False))
            .values(has_voted=True, voted_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)

    def count_by_category(self, category: Category) -> int:
        """Return the number of votes cast in a category."""
        stmt = select(func.count()).select_from(Vote).where(Vote.category == category)
        return int(self.session.scalar(stmt) or 0)

    def count_by_candidate(self, candidate_id: int) -> int:
        """Return the number of vote rows pointing at a candidate."""
        stmt = select(func.count()).select_from(Vote).where(Vote.candidate_id == candidate_id)
        return int(self.session.scalar(stmt) or 0)

    def exists_for_pin(self, pin: str, category: Category) -> bool:
        """Return True if any device registered with ``pin`` voted in ``category``."""
        stmt = (
            select(Vote.id)
            .join(Voter, Vote.voter_id == Voter.id)
            .where(Voter.pin == pin, Vote.category == category)
            .limit(1)
        )
        return self.session.scalar(stmt) is not None
