"""Device-to-voter registry with race-tolerant creation."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pageant_vote.core.errors import TransientRegistryConflict
from pageant_vote.db.errors import is_unique_violation
from pageant_vote.models import Voter

__all__ = ["VoterRegistry"]

logger = logging.getLogger(__name__)

_DEVICE_CONSTRAINT = "uk_voter_device_id"
_DEVICE_COLUMNS = ("voter.device_id",)


class VoterRegistry:
    """Maps opaque device identifiers to voter rows."""

    def __init__(self, session: Session) -> None:
        """Initialize the registry with a SQLAlchemy session."""
        self.session = session

    def find_by_device(self, device_id: str) -> Voter | None:
        """Return the voter registered for a device, without locking."""
        return self.session.scalars(
            select(Voter).where(Voter.device_id == device_id)
        ).first()

    def any_with_pin(self, pin: str) -> list[Voter]:
        """Return every voter that was created with the given shared PIN."""
        return list(self.session.scalars(select(Voter).where(Voter.pin == pin)))

    def get_or_create(self, pin: str, device_id: str) -> Voter:
        """Return the voter for ``device_id``, creating it on first sight.

        Creation is committed on its own so the row is visible to concurrent
        requests before any vote is written. When two requests race on the
        same device, the loser's insert trips ``uk_voter_device_id``; that is
        ordinary contention and resolves by reading the winner's row. An
        existing voter's PIN is never rewritten.

        Raises:
            TransientRegistryConflict: If the winning row cannot be read back.
        """
        voter = self.find_by_device(device_id)
        if voter is not None:
            return voter

        voter = Voter(pin=pin, device_id=device_id, has_voted=False)
        self.session.add(voter)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if not is_unique_violation(exc, _DEVICE_CONSTRAINT, _DEVICE_COLUMNS):
                raise
            logger.debug("Voter creation for device %s lost a race; re-reading", device_id)
            existing = self.find_by_device(device_id)
            if existing is None:
                raise TransientRegistryConflict(device_id) from exc
            return existing

        self.session.refresh(voter)
        logger.info("Registered voter %s for a new device", voter.id)
        return voter
