# src/pageant_vote/models/voter.py
"""Anonymous voting devices."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pageant_vote.db.session import Base
from pageant_vote.db.time import utcnow


class Voter(Base):
    """One physical or network device.

    The device identifier is the identity key. The PIN is recorded for
    information only: it is shared by many devices and written once.
    """

    __tablename__ = "voter"
    __table_args__ = (
        UniqueConstraint("device_id", name="uk_voter_device_id"),
        Index("ix_voter_pin", "pin"),
        Index("ix_voter_has_voted", "has_voted"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pin: Mapped[str] = mapped_column(String(16), nullable=False)
    device_id: Mapped[str] = mapped_column(String(255), nullable=False)
    has_voted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    # Stamped by the first committed vote only.
    voted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
