# src/pageant_vote/api/v1/endpoints/auth.py
"""Shared-PIN verification endpoint."""

from fastapi import APIRouter, HTTPException, Request, status

from pageant_vote.schemas.auth import VerifyPinRequest, VerifyPinResponse
from pageant_vote.services.auth import PinAccepted, RateLimited

from ..dependencies import (
    ClientAddressDep,
    PinVerifierDep,
    SessionDep,
    VotingServiceDep,
    resolve_device_id,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/verify-pin", response_model=VerifyPinResponse)
def verify_pin(
    payload: VerifyPinRequest,
    request: Request,
    db: SessionDep,
    verifier: PinVerifierDep,
    voting: VotingServiceDep,
    client: ClientAddressDep,
) -> VerifyPinResponse:
    """Check a shared PIN, throttling repeated failures from one client.

    Returns 404 for an unknown PIN (the frontend treats that as "does not
    exist") and 429 with ``Retry-After`` while the client is locked out.
    """
    outcome = verifier.verify(payload.pin, client)
    if isinstance(outcome, RateLimited):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "message": "Too many PIN attempts. Please try again later.",
                "retryAfterSeconds": outcome.retry_after,
            },
            headers={"Retry-After": str(outcome.retry_after)},
        )
    if not isinstance(outcome, PinAccepted):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Pin not found", "remainingAttempts": outcome.remaining_attempts},
        )

    device_id = resolve_device_id(request)
    return VerifyPinResponse(
        valid=True,
        already_voted=voting.device_has_voted(db, device_id),
        remaining_attempts=outcome.remaining_attempts,
    )
