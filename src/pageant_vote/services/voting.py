"""Vote submission protocol.

Submissions are optimistic: the service runs cheap, non-locking pre-checks to
turn away obvious duplicates, then writes inside one unit of work and lets the
``uk_vote_voter_category`` constraint settle any race the pre-checks missed.
Counters only move through server-side increments, so concurrent votes for the
same candidate never lose an update.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pageant_vote.core.errors import (
    Accepted,
    AlreadyVoted,
    CandidateNotFound,
    Conflict,
    NotFound,
    SubmissionOutcome,
    TransientRegistryConflict,
    VotingError,
)
from pageant_vote.models import Candidate, Category, Voter
from pageant_vote.repositories.candidates import CandidateRepository
from pageant_vote.repositories.vote_ledger import VoteLedger
from pageant_vote.repositories.voter_registry import VoterRegistry
from pageant_vote.services.cache import ResultsCache

logger = logging.getLogger(__name__)

VoteSelection = tuple[Category, int]


class VotingService:
    """Orchestrates single and bulk vote submission against one session."""

    def __init__(self, cache: ResultsCache | None = None) -> None:
        self.cache = cache

    def submit_vote(
        self,
        session: Session,
        *,
        device_id: str,
        pin: str,
        category: Category,
        candidate_number: int,
    ) -> SubmissionOutcome:
        """Cast one vote for ``device_id`` in ``category``.

        Exactly one of any number of concurrent submissions for the same
        device and category is accepted; the rest come back as ``Conflict``.
        """
        registry = VoterRegistry(session)
        ledger = VoteLedger(session)
        try:
            existing = registry.find_by_device(device_id)
            if existing is not None and ledger.has_voted(existing, category):
                raise AlreadyVoted()

            voter = registry.get_or_create(pin, device_id)
            if ledger.has_voted(voter, category):
                raise AlreadyVoted(category)

            candidate = CandidateRepository(session).find(category, candidate_number)
            if candidate is None:
                raise CandidateNotFound(category, candidate_number)

            self._persist(session, ledger, voter, [candidate])
        except VotingError as exc:
            session.rollback()
            return self._reject(exc, device_id)

        self._invalidate()
        logger.info("Accepted %s vote from voter %s", category.value, voter.id)
        return Accepted("Vote submitted successfully", (category,))

    def submit_bulk_votes(
        self,
        session: Session,
        *,
        device_id: str,
        pin: str,
        votes: Iterable[VoteSelection],
    ) -> SubmissionOutcome:
        """Cast several votes as a single all-or-nothing unit of work.

        Every selection is validated before anything is written. If any insert
        still fails, the whole batch is rolled back.
        """
        selections = list(votes)
        if not selections:
            raise ValueError("At least one vote is required")

        categories = [category for category, _ in selections]
        if len(set(categories)) != len(categories):
            return Conflict("Each category may only appear once per submission")

        registry = VoterRegistry(session)
        ledger = VoteLedger(session)
        try:
            existing = registry.find_by_device(device_id)
            if existing is not None:
                self._ensure_not_voted(ledger, existing, categories)

            resolved = CandidateRepository(session).find_many(selections)
            for category, number in selections:
                if (category, number) not in resolved:
                    raise CandidateNotFound(category, number)

            voter = registry.get_or_create(pin, device_id)
            self._ensure_not_voted(ledger, voter, categories)

            self._persist(session, ledger, voter, [resolved[item] for item in selections])
        except VotingError as exc:
            session.rollback()
            return self._reject(exc, device_id)

        self._invalidate()
        logger.info("Accepted bulk vote (%d categories) from voter %s", len(selections), voter.id)
        return Accepted("All votes submitted successfully", tuple(categories))

    def device_has_voted(self, session: Session, device_id: str) -> bool:
        """Return True if the device has a committed vote."""
        voter = VoterRegistry(session).find_by_device(device_id)
        return voter is not None and voter.has_voted

    def has_voted(self, session: Session, pin: str, category: Category) -> bool:
        """Return True if any device that used ``pin`` voted in ``category``."""
        return VoteLedger(session).exists_for_pin(pin, category)

    @staticmethod
    def _ensure_not_voted(ledger: VoteLedger, voter: Voter, categories: Sequence[Category]) -> None:
        voted = ledger.voted_categories(voter)
        for category in categories:
            if category in voted:
                raise AlreadyVoted(category)

    @staticmethod
    def _persist(
        session: Session,
        ledger: VoteLedger,
        voter: Voter,
        candidates: Sequence[Candidate],
    ) -> None:
        """Write votes, increments and the voted flag, then commit them together.

        A ``DuplicateVote`` propagates to the caller, which rolls back.
        """
        voter_id = voter.id
        try:
            for candidate in candidates:
                ledger.record_vote(voter, candidate, candidate.category)
                ledger.increment_candidate_count(candidate.id)
            ledger.mark_voted(voter)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Vote transaction for voter %s failed", voter_id)
            raise

    def _invalidate(self) -> None:
        if self.cache is not None:
            self.cache.invalidate_all()

    @staticmethod
    def _reject(exc: VotingError, device_id: str) -> SubmissionOutcome:
        if isinstance(exc, CandidateNotFound):
            logger.debug("Rejected vote for unknown candidate: %s", exc)
            return NotFound(str(exc))
        if isinstance(exc, TransientRegistryConflict):
            logger.warning("Voter registry race for device %s could not be resolved", device_id)
            return Conflict(str(exc), retryable=True)
        logger.debug("Rejected duplicate vote: %s", exc)
        return Conflict(str(exc))
