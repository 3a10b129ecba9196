# src/pageant_vote/api/v1/endpoints/candidates.py
"""Candidate listing endpoint."""

from fastapi import APIRouter

from pageant_vote.schemas.candidate import CandidateResponse

from ..dependencies import ResultsAggregatorDep, SessionDep, parse_category

router = APIRouter(prefix="/candidates", tags=["candidates"])


@router.get("/{category}", response_model=list[CandidateResponse])
def list_candidates(
    category: str,
    db: SessionDep,
    aggregator: ResultsAggregatorDep,
) -> list[CandidateResponse]:
    """Return the candidates standing in a category, ordered by number."""
    return aggregator.candidates_for(db, parse_category(category))
