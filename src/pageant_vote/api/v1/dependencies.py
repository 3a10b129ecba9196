"""Shared API dependencies for sessions, services and device identity."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from pageant_vote.core.settings import settings
from pageant_vote.db.session import get_db
from pageant_vote.models import Category
from pageant_vote.services.auth import PinVerifier
from pageant_vote.services.cache import ResultsCache
from pageant_vote.services.rate_limit import RateLimiter
from pageant_vote.services.results import ResultsAggregator
from pageant_vote.services.voting import VotingService
from pageant_vote.utils.device import client_address, device_id_from_address

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_rate_limiter(request: Request) -> RateLimiter:
    """Return the application's process-wide rate limiter."""
    return request.app.state.rate_limiter


def get_results_cache(request: Request) -> ResultsCache:
    """Return the application's results cache."""
    return request.app.state.results_cache


def get_voting_service(cache: Annotated[ResultsCache, Depends(get_results_cache)]) -> VotingService:
    """Return a voting service wired to the shared cache."""
    return VotingService(cache)


def get_results_aggregator(
    cache: Annotated[ResultsCache, Depends(get_results_cache)],
) -> ResultsAggregator:
    """Return a results aggregator wired to the shared cache."""
    return ResultsAggregator(cache)


def get_pin_verifier(limiter: Annotated[RateLimiter, Depends(get_rate_limiter)]) -> PinVerifier:
    """Return a PIN verifier backed by the shared rate limiter."""
    return PinVerifier(limiter)


def get_client_address(request: Request) -> str | None:
    """Return the caller's address, honouring proxy headers."""
    peer = request.client.host if request.client else None
    return client_address(request.headers, peer)


def resolve_device_id(request: Request, supplied: str | None = None) -> str:
    """Resolve the opaque device identifier for a request.

    ``DEVICE_ID_SOURCE`` picks the preferred source; when it yields nothing the
    remaining sources are tried, ending with the client-address hash, which is
    always available.
    """
    cookie_id = getattr(request.state, "device_id", None) or request.cookies.get(
        settings.device_cookie_name
    )
    supplied = supplied.strip() if supplied else None

    if settings.device_id_source == "cookie":
        ordered = (cookie_id, supplied)
    elif settings.device_id_source == "client":
        ordered = (supplied, cookie_id)
    else:
        ordered = ()

    for candidate in ordered:
        if candidate:
            return candidate
    return device_id_from_address(get_client_address(request))


def parse_category(value: str) -> Category:
    """Parse a category path or query value case-insensitively.

    Raises:
        HTTPException: 400 if the value is not a known category.
    """
    try:
        return Category(value.strip().upper())
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown category: {value}",
        ) from err


def require_admin(
    pin: str,
    verifier: Annotated[PinVerifier, Depends(get_pin_verifier)],
) -> None:
    """Reject the request unless ``pin`` is the administrator PIN."""
    if not verifier.is_admin_pin(pin):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


ClientAddressDep = Annotated[str | None, Depends(get_client_address)]
PinVerifierDep = Annotated[PinVerifier, Depends(get_pin_verifier)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
ResultsAggregatorDep = Annotated[ResultsAggregator, Depends(get_results_aggregator)]
VotingServiceDep = Annotated[VotingService, Depends(get_voting_service)]
AdminDep = Annotated[None, Depends(require_admin)]
