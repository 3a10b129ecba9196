# tests/test_repositories.py
"""Tests for the voter registry, vote ledger and candidate lookups."""

import pytest

from pageant_vote.core.errors import DuplicateVote
from pageant_vote.models import Category
from pageant_vote.repositories.candidates import CandidateRepository
from pageant_vote.repositories.vote_ledger import VoteLedger
from pageant_vote.repositories.voter_registry import VoterRegistry


def test_get_or_create_is_idempotent(db_session) -> None:
    registry = VoterRegistry(db_session)

    first = registry.get_or_create("12345", "device-a")
    second = registry.get_or_create("54321", "device-a")

    assert first.id == second.id
    assert second.pin == "12345"
    assert second.has_voted is False
    assert registry.find_by_device("device-b") is None


def test_any_with_pin(db_session) -> None:
    registry = VoterRegistry(db_session)
    registry.get_or_create("12345", "device-a")
    registry.get_or_create("12345", "device-b")
    registry.get_or_create("77777", "device-c")

    assert {v.device_id for v in registry.any_with_pin("12345")} == {"device-a", "device-b"}
    assert registry.any_with_pin("00000") == []


def test_ledger_records_and_counts(db_session, full_ballot) -> None:
    voter = VoterRegistry(db_session).get_or_create("12345", "device-a")
    ledger = VoteLedger(db_session)
    king = full_ballot[Category.KING][0]

    assert ledger.has_any_vote(voter) is False

    ledger.record_vote(voter, king, Category.KING)
    ledger.increment_candidate_count(king.id)
    assert ledger.mark_voted(voter) is True
    db_session.commit()

    assert ledger.has_voted(voter, Category.KING) is True
    assert ledger.has_voted(voter, Category.QUEEN) is False
    assert ledger.has_any_vote(voter) is True
    assert ledger.voted_categories(voter) == {Category.KING}
    assert ledger.count_by_category(Category.KING) == 1
    assert ledger.count_by_candidate(king.id) == 1
    assert ledger.exists_for_pin("12345", Category.KING) is True

    # The flag flips once; later votes leave the first timestamp alone.
    assert ledger.mark_voted(voter) is False
    db_session.rollback()


def test_ledger_maps_constraint_violation(db_session, full_ballot) -> None:
    voter = VoterRegistry(db_session).get_or_create("12345", "device-a")
    ledger = VoteLedger(db_session)
    first, second = full_ballot[Category.QUEEN]
    ledger.record_vote(voter, first, Category.QUEEN)
    db_session.commit()

    with pytest.raises(DuplicateVote):
        ledger.record_vote(voter, second, Category.QUEEN)
    db_session.rollback()

    assert ledger.count_by_category(Category.QUEEN) == 1


def test_find_many_skips_unknown_pairs(db_session, full_ballot) -> None:
    repo = CandidateRepository(db_session)

    found = repo.find_many([(Category.KING, 1), (Category.QUEEN, 2), (Category.COUPLE, 9)])

    assert set(found) == {(Category.KING, 1), (Category.QUEEN, 2)}
    assert found[(Category.QUEEN, 2)].id == full_ballot[Category.QUEEN][1].id
    assert repo.find_many([]) == {}
    assert repo.find(Category.COUPLE, 9) is None
