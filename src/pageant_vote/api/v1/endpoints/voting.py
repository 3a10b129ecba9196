# src/pageant_vote/api/v1/endpoints/voting.py
"""Vote submission endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from pageant_vote.core.errors import Accepted, Conflict, SubmissionOutcome
from pageant_vote.schemas.common import MessageResponse
from pageant_vote.schemas.vote import BulkVoteRequest, VoteRequest
from pageant_vote.services.auth import PinAccepted, PinVerifier, RateLimited

from ..dependencies import (
    ClientAddressDep,
    PinVerifierDep,
    SessionDep,
    VotingServiceDep,
    parse_category,
    resolve_device_id,
)

router = APIRouter(prefix="/voting", tags=["voting"])


def _authorize(verifier: PinVerifier, pin: str, client: str | None) -> None:
    outcome = verifier.verify(pin, client)
    if isinstance(outcome, RateLimited):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many PIN attempts. Please try again later.",
            headers={"Retry-After": str(outcome.retry_after)},
        )
    if not isinstance(outcome, PinAccepted):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid PIN")


def _to_response(outcome: SubmissionOutcome) -> JSONResponse:
    if isinstance(outcome, Accepted):
        code, body = status.HTTP_200_OK, MessageResponse(success=True, message=outcome.message)
    elif isinstance(outcome, Conflict):
        code, body = status.HTTP_409_CONFLICT, MessageResponse(success=False, message=outcome.reason)
    else:
        code, body = status.HTTP_404_NOT_FOUND, MessageResponse(success=False, message=outcome.reason)
    return JSONResponse(status_code=code, content=body.model_dump(by_alias=True))


@router.post("/vote", response_model=MessageResponse)
def submit_vote(
    payload: VoteRequest,
    request: Request,
    db: SessionDep,
    voting: VotingServiceDep,
    verifier: PinVerifierDep,
    client: ClientAddressDep,
) -> JSONResponse:
    """Submit a single vote for a category."""
    _authorize(verifier, payload.pin, client)
    outcome = voting.submit_vote(
        db,
        device_id=resolve_device_id(request, payload.device_id),
        pin=payload.pin.strip(),
        category=payload.category,
        candidate_number=payload.candidate_number,
    )
    return _to_response(outcome)


@router.post("/bulk-vote", response_model=MessageResponse)
def submit_bulk_votes(
    payload: BulkVoteRequest,
    request: Request,
    db: SessionDep,
    voting: VotingServiceDep,
    verifier: PinVerifierDep,
    client: ClientAddressDep,
) -> JSONResponse:
    """Submit votes for several categories in one all-or-nothing transaction."""
    _authorize(verifier, payload.pin, client)
    outcome = voting.submit_bulk_votes(
        db,
        device_id=resolve_device_id(request, payload.device_id),
        pin=payload.pin.strip(),
        votes=[(item.category, item.candidate_number) for item in payload.votes],
    )
    return _to_response(outcome)


@router.get("/has-voted")
def has_voted(pin: str, category: str, db: SessionDep, voting: VotingServiceDep) -> bool:
    """Return whether any device using ``pin`` has voted in ``category``."""
    return voting.has_voted(db, pin.strip(), parse_category(category))


@router.get("/device-has-voted")
def device_has_voted(
    request: Request,
    db: SessionDep,
    voting: VotingServiceDep,
    device_id: Annotated[str | None, Query(alias="deviceId")] = None,
) -> bool:
    """Return whether the named device, or the calling one, has a committed vote."""
    return voting.device_has_voted(db, device_id or resolve_device_id(request))
