# src/pageant_vote/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import VerifyPinRequest, VerifyPinResponse
from .candidate import CandidateResponse
from .common import MessageResponse
from .result import CandidateResult, CategoryResults, RateLimitStatus
from .vote import BulkVoteRequest, VoteItem, VoteRequest

__all__ = [
    "VerifyPinRequest", "VerifyPinResponse",
    "CandidateResponse",
    "MessageResponse",
    "CandidateResult", "CategoryResults", "RateLimitStatus",
    "BulkVoteRequest", "VoteItem", "VoteRequest",
]
