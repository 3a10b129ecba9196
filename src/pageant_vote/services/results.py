"""Read-side projection of vote counts into live results."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from pageant_vote.models import Candidate, Category
from pageant_vote.repositories.candidates import CandidateRepository
from pageant_vote.repositories.vote_ledger import VoteLedger
from pageant_vote.schemas.candidate import CandidateResponse
from pageant_vote.schemas.result import CandidateResult, CategoryResults
from pageant_vote.services.cache import CANDIDATES_REGION, RESULTS_REGION, ResultsCache

_ALL_KEY = "all"
_LEADERBOARD_KEY = "leaderboard"
_CENT = Decimal("0.01")


def vote_percentage(vote_count: int, total_votes: int) -> float:
    """Return ``vote_count`` as a share of ``total_votes``, rounded half-up to 2 places."""
    if total_votes <= 0:
        return 0.0
    share = Decimal(vote_count) * 100 / Decimal(total_votes)
    return float(share.quantize(_CENT, rounding=ROUND_HALF_UP))


class ResultsAggregator:
    """Serves cached results and candidate listings.

    The cache is shared with ``VotingService``, which evicts it after every
    committed vote.
    """

    def __init__(self, cache: ResultsCache) -> None:
        self.cache = cache

    def results_for(self, session: Session, category: Category) -> CategoryResults:
        """Return the totals and per-candidate percentages for a category."""
        return self.cache.get_or_load(
            RESULTS_REGION,
            category,
            lambda: self._compute(session, category),
        )

    def all_results(self, session: Session) -> list[CategoryResults]:
        """Return results for every category in declaration order."""
        return self.cache.get_or_load(
            RESULTS_REGION,
            _ALL_KEY,
            lambda: [self._compute(session, category) for category in Category],
        )

    def leaderboard(self, session: Session) -> list[CandidateResult]:
        """Return every candidate across categories, most votes first."""

        def _load() -> list[CandidateResult]:
            standings = [
                candidate
                for results in (self._compute(session, category) for category in Category)
                for candidate in results.candidates
            ]
            return sorted(standings, key=lambda item: item.vote_count, reverse=True)

        return self.cache.get_or_load(RESULTS_REGION, _LEADERBOARD_KEY, _load)

    def candidates_for(self, session: Session, category: Category) -> list[CandidateResponse]:
        """Return the candidate listing for a category, ordered by number."""
        return self.cache.get_or_load(
            CANDIDATES_REGION,
            category,
            lambda: [
                CandidateResponse.model_validate(candidate)
                for candidate in CandidateRepository(session).list_by_category(category)
            ],
        )

    @staticmethod
    def _compute(session: Session, category: Category) -> CategoryResults:
        candidates = CandidateRepository(session).list_by_category(category)
        total_votes = VoteLedger(session).count_by_category(category)
        return CategoryResults(
            category=category,
            total_votes=total_votes,
            candidates=[_standing(candidate, total_votes) for candidate in candidates],
        )


def _standing(candidate: Candidate, total_votes: int) -> CandidateResult:
    return CandidateResult(
        id=candidate.id,
        category=candidate.category,
        candidate_number=candidate.candidate_number,
        name=candidate.name,
        department=candidate.department,
        image_url=candidate.image_url,
        vote_count=candidate.vote_count,
        percentage=vote_percentage(candidate.vote_count, total_votes),
    )
