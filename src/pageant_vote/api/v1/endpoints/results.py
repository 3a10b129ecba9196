# src/pageant_vote/api/v1/endpoints/results.py
"""Live results endpoints."""

from fastapi import APIRouter

from pageant_vote.schemas.result import CategoryResults

from ..dependencies import ResultsAggregatorDep, SessionDep, parse_category

router = APIRouter(prefix="/results", tags=["results"])


@router.get("/all", response_model=list[CategoryResults])
def get_all_results(db: SessionDep, aggregator: ResultsAggregatorDep) -> list[CategoryResults]:
    """Return results for every category."""
    return aggregator.all_results(db)


@router.get("/{category}", response_model=CategoryResults)
def get_results(category: str, db: SessionDep, aggregator: ResultsAggregatorDep) -> CategoryResults:
    """Return results for one category (case-insensitive)."""
    return aggregator.results_for(db, parse_category(category))
