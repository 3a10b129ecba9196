# src/pageant_vote/schemas/candidate.py
"""Candidate listing schema."""

from pageant_vote.models import Category

from .common import CamelModel


class CandidateResponse(CamelModel):
    """Public view of a candidate."""

    id: int
    category: Category
    candidate_number: int
    name: str
    department: str | None = None
    image_url: str | None = None
    vote_count: int
