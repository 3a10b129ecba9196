# src/pageant_vote/schemas/result.py
"""Read-side schemas for live results."""

from pageant_vote.models import Category

from .common import CamelModel


class CandidateResult(CamelModel):
    """A candidate's standing within its category."""

    id: int
    category: Category
    candidate_number: int
    name: str
    department: str | None = None
    image_url: str | None = None
    vote_count: int
    percentage: float


class CategoryResults(CamelModel):
    """Aggregated results for one category."""

    category: Category
    total_votes: int
    candidates: list[CandidateResult]


class RateLimitStatus(CamelModel):
    """Admin view of a client's PIN attempt standing."""

    key: str
    attempts: int
    max_attempts: int
    locked_out: bool
    retry_after_seconds: int = 0
