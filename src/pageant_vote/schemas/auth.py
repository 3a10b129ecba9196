# src/pageant_vote/schemas/auth.py
"""PIN verification schemas."""

from pydantic import Field

from .common import CamelModel


class VerifyPinRequest(CamelModel):
    """Schema for checking a shared access PIN."""

    pin: str = Field(..., min_length=1, max_length=16)


class VerifyPinResponse(CamelModel):
    """Result of a PIN check for the calling device."""

    valid: bool
    already_voted: bool = False
    remaining_attempts: int
