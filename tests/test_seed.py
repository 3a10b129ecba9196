# tests/test_seed.py
from sqlalchemy import select

from pageant_vote.models import Candidate, Category
from pageant_vote.scripts.seed_candidates import seed_candidates

ENTRIES = [
    {"category": "king", "candidateNumber": 1, "name": "Arthur", "department": "History"},
    {"category": "KING", "candidateNumber": 2, "name": "Bran"},
    {"category": "QUEEN", "candidateNumber": 1, "name": "Cora", "imageUrl": "/img/cora.png"},
]


def test_seed_inserts_candidates(db_session) -> None:
    assert seed_candidates(db_session, ENTRIES) == 3

    kings = db_session.scalars(
        select(Candidate).where(Candidate.category == Category.KING).order_by(Candidate.candidate_number)
    ).all()
    assert [k.name for k in kings] == ["Arthur", "Bran"]
    assert kings[0].department == "History"
    assert kings[0].vote_count == 0


def test_seed_is_idempotent(db_session) -> None:
    seed_candidates(db_session, ENTRIES)

    assert seed_candidates(db_session, ENTRIES) == 0
    assert len(db_session.scalars(select(Candidate)).all()) == 3
