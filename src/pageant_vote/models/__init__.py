# src/pageant_vote/models/__init__.py
"""SQLAlchemy models for the Pageant Vote application."""

from .candidate import Candidate, Category
from .vote import VOTE_UNIQUE_CONSTRAINT, Vote
from .voter import Voter

__all__ = [
    "Candidate", "Category",
    "Vote", "VOTE_UNIQUE_CONSTRAINT",
    "Voter",
]
