# src/pageant_vote/api/v1/endpoints/admin.py
"""Administrator views guarded by the admin PIN."""

from fastapi import APIRouter, status

from pageant_vote.schemas.result import CandidateResult, RateLimitStatus

from ..dependencies import AdminDep, RateLimiterDep, ResultsAggregatorDep, SessionDep

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/results", response_model=list[CandidateResult])
def live_results(
    _: AdminDep,
    db: SessionDep,
    aggregator: ResultsAggregatorDep,
) -> list[CandidateResult]:
    """Return every candidate across categories, most votes first."""
    return aggregator.leaderboard(db)


@router.get("/rate-limit/{key}", response_model=RateLimitStatus)
def rate_limit_status(key: str, _: AdminDep, limiter: RateLimiterDep) -> RateLimitStatus:
    """Show a client's PIN attempt standing."""
    info = limiter.info(key)
    return RateLimitStatus(
        key=key,
        attempts=info.attempts,
        max_attempts=info.max_attempts,
        locked_out=info.locked_out,
        retry_after_seconds=info.retry_after_seconds,
    )


@router.delete("/rate-limit/{key}", status_code=status.HTTP_204_NO_CONTENT)
def clear_rate_limit(key: str, _: AdminDep, limiter: RateLimiterDep) -> None:
    """Lift any lockout and forget a client's failed attempts."""
    limiter.clear(key)
