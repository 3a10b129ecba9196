# src/pageant_vote/scripts/seed_candidates.py
"""Seed candidates from a JSON file.

The file holds a list of objects with ``category``, ``candidateNumber``,
``name`` and optional ``department`` / ``imageUrl``. Existing
(category, number) pairs are left untouched, so the script can be re-run.

Usage:
    python -m pageant_vote.scripts.seed_candidates candidates.json
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from pageant_vote.db.session import SessionLocal, create_tables
from pageant_vote.models import Candidate, Category
from pageant_vote.repositories.candidates import CandidateRepository

logger = logging.getLogger(__name__)


def seed_candidates(db: Session, entries: list[dict[str, Any]]) -> int:
    """Insert candidates that do not exist yet and return how many were added."""
    repo = CandidateRepository(db)
    added = 0
    for entry in entries:
        category = Category(str(entry["category"]).upper())
        number = int(entry["candidateNumber"])
        if repo.find(category, number) is not None:
            continue
        db.add(
            Candidate(
                category=category,
                candidate_number=number,
                name=entry["name"],
                department=entry.get("department"),
                image_url=entry.get("imageUrl"),
                vote_count=0,
            )
        )
        added += 1
    db.commit()
    return added


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed contest candidates")
    parser.add_argument("path", type=Path, help="JSON file with candidate entries")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    if args.create_tables:
        create_tables()

    entries = json.loads(args.path.read_text(encoding="utf-8"))
    with SessionLocal() as db:
        added = seed_candidates(db, entries)
    logger.info("Seeded %d new candidates from %s", added, args.path)


if __name__ == "__main__":
    main()
