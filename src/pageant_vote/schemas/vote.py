# src/pageant_vote/schemas/vote.py
"""Vote-related Pydantic schemas."""

from pydantic import Field

from pageant_vote.models import Category

from .common import CamelModel


class VoteRequest(CamelModel):
    """Schema for submitting a single vote."""

    device_id: str | None = Field(
        default=None,
        max_length=255,
        description="Client-generated device id; only used when the server cannot resolve one.",
    )
    pin: str = Field(..., min_length=1, max_length=16)
    category: Category
    candidate_number: int = Field(..., ge=1)


class VoteItem(CamelModel):
    """One (category, candidate) pair inside a bulk submission."""

    category: Category
    candidate_number: int = Field(..., ge=1)


class BulkVoteRequest(CamelModel):
    """Schema for submitting several categories in one all-or-nothing batch."""

    device_id: str | None = Field(default=None, max_length=255)
    pin: str = Field(..., min_length=1, max_length=16)
    votes: list[VoteItem] = Field(..., min_length=1)
