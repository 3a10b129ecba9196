# src/pageant_vote/services/__init__.py
"""Business logic services for the Pageant Vote application."""

from .auth import PinVerifier
from .cache import ResultsCache
from .rate_limit import RateLimiter
from .results import ResultsAggregator
from .voting import VotingService

__all__ = [
    "PinVerifier",
    "RateLimiter",
    "ResultsAggregator",
    "ResultsCache",
    "VotingService",
]
