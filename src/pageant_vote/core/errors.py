# src/pageant_vote/core/errors.py
"""Domain errors and submission outcomes for the voting core.

The exceptions here are raised between the repositories and the voting
service. Callers of ``VotingService`` never see them: every expected outcome is
returned as one of the ``SubmissionOutcome`` variants instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pageant_vote.models import Category


class VotingError(Exception):
    """Base class for expected voting-domain conditions."""


class AlreadyVoted(VotingError):
    """The device already holds a vote in the category."""

    def __init__(self, category: Category | None = None) -> None:
        self.category = category
        if category is None:
            message = "You have already voted in this category"
        else:
            message = f"You have already voted in category: {category.value}"
        super().__init__(message)


class DuplicateVote(VotingError):
    """The storage layer rejected a vote through its (voter, category) constraint."""

    def __init__(self, category: Category | None = None) -> None:
        self.category = category
        super().__init__("Duplicate vote detected. You may have already voted in this category.")


class CandidateNotFound(VotingError):
    """No candidate carries the requested number in the category."""

    def __init__(self, category: Category, candidate_number: int) -> None:
        self.category = category
        self.candidate_number = candidate_number
        super().__init__(
            f"Candidate not found for category {category.value} and number {candidate_number}"
        )


class TransientRegistryConflict(VotingError):
    """Voter creation lost a race and the winning row could not be read back."""

    def __init__(self, device_id: str) -> None:
        self.device_id = device_id
        super().__init__("Failed to create voter. Please try again.")


@dataclass(frozen=True)
class Accepted:
    """All requested votes were committed."""

    message: str
    categories: tuple[Category, ...] = ()


@dataclass(frozen=True)
class Conflict:
    """The dedup invariant refused the submission.

    ``retryable`` is only set when the voter registry could not settle a race;
    an already-cast vote is never retryable.
    """

    reason: str
    retryable: bool = False


@dataclass(frozen=True)
class NotFound:
    """The submission referenced a candidate that does not exist."""

    reason: str


SubmissionOutcome = Union[Accepted, Conflict, NotFound]
