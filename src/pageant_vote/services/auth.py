"""Shared-PIN verification guarded by the rate limiter."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Union

from pageant_vote.core.settings import settings
from pageant_vote.services.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PinAccepted:
    """The PIN matched; the caller's failure count was reset."""

    remaining_attempts: int
    is_admin: bool = False
    valid: bool = True


@dataclass(frozen=True)
class UnknownPin:
    """The PIN matched nothing and counted as a failed attempt."""

    remaining_attempts: int


@dataclass(frozen=True)
class RateLimited:
    """The caller is locked out and must wait ``retry_after`` seconds."""

    retry_after: int


PinOutcome = Union[PinAccepted, UnknownPin, RateLimited]


def _matches(candidate: str, expected: str) -> bool:
    return secrets.compare_digest(candidate.encode(), expected.encode())


class PinVerifier:
    """Checks shared access PINs on behalf of a client key (its address)."""

    def __init__(
        self,
        limiter: RateLimiter,
        *,
        user_pin: str | None = None,
        admin_pin: str | None = None,
    ) -> None:
        self.limiter = limiter
        self.user_pin = user_pin if user_pin is not None else settings.user_pin
        self.admin_pin = admin_pin if admin_pin is not None else settings.admin_pin

    def is_admin_pin(self, pin: str | None) -> bool:
        """Return True if ``pin`` is the administrator PIN."""
        return pin is not None and _matches(pin.strip(), self.admin_pin)

    def verify(self, pin: str, client_key: str | None) -> PinOutcome:
        """Verify ``pin`` for ``client_key``, counting failures against its window.

        The check, the comparison and the recorded attempt run under the key's
        lock so two simultaneous guesses from one client cannot both slip in
        under the limit.
        """
        key = client_key or ""
        with self.limiter.hold(key):
            decision = self.limiter.check(key)
            if not decision.allowed:
                return RateLimited(decision.retry_after_seconds)

            candidate = pin.strip()
            is_admin = _matches(candidate, self.admin_pin)
            valid = is_admin or _matches(candidate, self.user_pin)
            self.limiter.record_attempt(key, valid)

        if valid:
            return PinAccepted(self.limiter.max_attempts, is_admin=is_admin)
        logger.info("Rejected PIN attempt from %s", key or "unknown client")
        return UnknownPin(max(decision.remaining_attempts - 1, 0))
