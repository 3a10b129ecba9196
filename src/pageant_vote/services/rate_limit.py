"""Sliding-window rate limiting with lockout for PIN verification."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Lock, RLock

from pageant_vote.core.settings import settings

logger = logging.getLogger(__name__)

_LOCK_STRIPES = 64
_MAX_TRACKED_KEYS = 10_000


@dataclass
class AttemptState:
    """Mutable per-key counters. Only touched while the key's lock is held."""

    attempt_count: int
    window_start: float
    lockout_until: float | None = None


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate-limit check."""

    allowed: bool
    remaining_attempts: int
    retry_after_seconds: int = 0


@dataclass(frozen=True)
class RateLimitInfo:
    """Snapshot of a key's state for admin tooling."""

    attempts: int
    max_attempts: int
    locked_out: bool
    retry_after_seconds: int = 0


class RateLimiter:
    """Process-local attempt tracker keyed by client address.

    Instances are created and owned by the FastAPI application
    (``app.state.rate_limiter``) and live as long as the process; a restart
    clears every limit. Keys hash onto a fixed set of re-entrant locks, so
    mutations of one key are serialized while distinct keys rarely contend.

    Entries are dropped on success or once their window or lockout has run
    out. When ``max_tracked_keys`` is reached, stale entries are swept before a
    new key is added.
    """

    def __init__(
        self,
        *,
        max_attempts: int | None = None,
        window_seconds: float | None = None,
        lockout_seconds: float | None = None,
        max_tracked_keys: int = _MAX_TRACKED_KEYS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_attempts = (
            max_attempts if max_attempts is not None else settings.rate_limit_max_attempts
        )
        self.window_seconds = (
            window_seconds if window_seconds is not None else settings.rate_limit_window_seconds
        )
        self.lockout_seconds = (
            lockout_seconds if lockout_seconds is not None else settings.rate_limit_lockout_seconds
        )
        self._max_tracked_keys = max_tracked_keys
        self._clock = clock
        self._states: dict[str, AttemptState] = {}
        self._states_lock = Lock()
        self._stripes = [RLock() for _ in range(_LOCK_STRIPES)]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold ``key``'s lock so a check and its recorded attempt run as one step."""
        lock = self._stripes[hash(key) % _LOCK_STRIPES]
        with lock:
            yield

    def check(self, key: str | None) -> RateLimitDecision:
        """Return whether ``key`` may make another attempt right now."""
        if not key or not key.strip():
            return RateLimitDecision(True, self.max_attempts)

        with self.hold(key):
            state = self._get_state(key)
            if state is None:
                return RateLimitDecision(True, self.max_attempts)

            now = self._clock()
            if state.lockout_until is not None and now < state.lockout_until:
                retry_after = math.ceil(state.lockout_until - now)
                return RateLimitDecision(False, 0, retry_after)

            if self._is_stale(state, now):
                self._drop(key)
                return RateLimitDecision(True, self.max_attempts)

            if state.attempt_count >= self.max_attempts:
                state.lockout_until = now + self.lockout_seconds
                logger.warning(
                    "Client %s locked out for %ss after %d failed PIN attempts",
                    key,
                    self.lockout_seconds,
                    state.attempt_count,
                )
                return RateLimitDecision(False, 0, math.ceil(self.lockout_seconds))

            return RateLimitDecision(True, self.max_attempts - state.attempt_count)

    def record_attempt(self, key: str | None, successful: bool) -> None:
        """Record an attempt; success forgets the key, failure counts against the window."""
        if not key or not key.strip():
            return

        with self.hold(key):
            if successful:
                self._drop(key)
                return
            state = self._get_state(key, create=True, now=self._clock())
            state.attempt_count += 1

    def clear(self, key: str) -> None:
        """Forget everything about ``key``."""
        with self.hold(key):
            self._drop(key)

    def __len__(self) -> int:
        """Return the number of keys currently tracked."""
        with self._states_lock:
            return len(self._states)

    def info(self, key: str) -> RateLimitInfo:
        """Describe ``key``'s current standing without mutating it."""
        with self.hold(key):
            state = self._get_state(key)
            if state is None:
                return RateLimitInfo(0, self.max_attempts, False)
            now = self._clock()
            locked_out = state.lockout_until is not None and now < state.lockout_until
            retry_after = math.ceil(state.lockout_until - now) if locked_out else 0
            return RateLimitInfo(state.attempt_count, self.max_attempts, locked_out, retry_after)

    def _get_state(
        self,
        key: str,
        *,
        create: bool = False,
        now: float | None = None,
    ) -> AttemptState | None:
        with self._states_lock:
            state = self._states.get(key)
            if state is None and create:
                now = now if now is not None else self._clock()
                if len(self._states) >= self._max_tracked_keys:
                    self._prune(now)
                state = AttemptState(attempt_count=0, window_start=now)
                self._states[key] = state
            return state

    def _drop(self, key: str) -> None:
        with self._states_lock:
            self._states.pop(key, None)

    def _is_stale(self, state: AttemptState, now: float) -> bool:
        if state.lockout_until is not None:
            return now >= state.lockout_until
        return now - state.window_start > self.window_seconds

    def _prune(self, now: float) -> None:
        # Caller holds _states_lock.
        stale = [key for key, state in self._states.items() if self._is_stale(state, now)]
        for key in stale:
            del self._states[key]
        if stale:
            logger.debug("Pruned %d stale rate-limit entries", len(stale))
