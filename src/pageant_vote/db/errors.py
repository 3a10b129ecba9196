# src/pageant_vote/db/errors.py
"""Classification of driver-level integrity errors."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError

# SQLSTATE for unique_violation (PostgreSQL and most ANSI-compliant engines).
UNIQUE_VIOLATION_SQLSTATE = "23505"


def _sqlstate(orig: BaseException | None) -> str | None:
    # psycopg 3 exposes ``sqlstate``; psycopg2 exposes ``pgcode``.
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _constraint_name(orig: BaseException | None) -> str | None:
    diag = getattr(orig, "diag", None)
    return getattr(diag, "constraint_name", None)


def is_unique_violation(
    exc: IntegrityError,
    constraint: str,
    columns: Iterable[str] = (),
) -> bool:
    """Return True if ``exc`` is a unique violation of ``constraint``.

    PostgreSQL reports the constraint by name. SQLite only reports the
    offending ``table.column`` list, so ``columns`` is matched instead.

    Args:
        exc: The integrity error raised on flush or commit.
        constraint: Name of the unique constraint, e.g. ``uk_vote_voter_category``.
        columns: Qualified column names (``table.column``) making up the constraint.
    """
    orig = exc.orig
    if _sqlstate(orig) == UNIQUE_VIOLATION_SQLSTATE:
        name = _constraint_name(orig)
        return name is None or name == constraint

    message = str(orig)
    if "UNIQUE constraint failed" in message:
        failed = message.split("UNIQUE constraint failed:", 1)[-1]
        failed_columns = {part.strip() for part in failed.split(",")}
        expected = set(columns)
        return not expected or failed_columns == expected
    if constraint in message:
        return True
    return False
