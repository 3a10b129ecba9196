# tests/test_results.py
"""Tests for results aggregation and the results cache."""

from sqlalchemy import update

from pageant_vote.models import Candidate, Category
from pageant_vote.services.cache import CANDIDATES_REGION, RESULTS_REGION, ResultsCache
from pageant_vote.services.results import ResultsAggregator, vote_percentage
from pageant_vote.services.voting import VotingService


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_percentages_round_half_up() -> None:
    assert vote_percentage(10, 15) == 66.67
    assert vote_percentage(5, 15) == 33.33
    assert vote_percentage(0, 15) == 0.0
    assert vote_percentage(1, 8) == 12.5
    # 0.125 rounds away from zero, not to even.
    assert vote_percentage(1, 800) == 0.13
    assert vote_percentage(1, 1600) == 0.06


def test_percentage_of_empty_category_is_zero() -> None:
    assert vote_percentage(0, 0) == 0.0


def test_category_results_from_counters(db_session, make_candidate) -> None:
    for number, votes in ((1, 10), (2, 5), (3, 0)):
        candidate = make_candidate(Category.QUEEN, number)
        db_session.execute(
            update(Candidate).where(Candidate.id == candidate.id).values(vote_count=votes)
        )
    db_session.commit()
    aggregator = ResultsAggregator(ResultsCache())

    # Totals come from vote rows, not counters; without rows every share is zero.
    results = aggregator.results_for(db_session, Category.QUEEN)

    assert results.category == Category.QUEEN
    assert results.total_votes == 0
    assert [c.vote_count for c in results.candidates] == [10, 5, 0]
    assert [c.percentage for c in results.candidates] == [0.0, 0.0, 0.0]


def test_results_after_real_votes(db_session, make_candidate) -> None:
    make_candidate(Category.KING, 1)
    make_candidate(Category.KING, 2)
    make_candidate(Category.KING, 3)
    service = VotingService()
    for index, number in enumerate([1, 1, 2]):
        service.submit_vote(
            db_session,
            device_id=f"device-{index}",
            pin="12345",
            category=Category.KING,
            candidate_number=number,
        )
    aggregator = ResultsAggregator(ResultsCache())

    results = aggregator.results_for(db_session, Category.KING)

    assert results.total_votes == 3
    assert [c.candidate_number for c in results.candidates] == [1, 2, 3]
    assert [c.percentage for c in results.candidates] == [66.67, 33.33, 0.0]
    assert sum(c.vote_count for c in results.candidates) == results.total_votes


def test_all_results_covers_every_category(db_session, full_ballot) -> None:
    aggregator = ResultsAggregator(ResultsCache())

    results = aggregator.all_results(db_session)

    assert [r.category for r in results] == list(Category)
    assert all(r.total_votes == 0 and len(r.candidates) == 2 for r in results)


def test_leaderboard_orders_by_votes(db_session, full_ballot) -> None:
    service = VotingService()
    for index in range(3):
        service.submit_vote(
            db_session,
            device_id=f"device-{index}",
            pin="12345",
            category=Category.COUPLE,
            candidate_number=2,
        )
    service.submit_vote(
        db_session, device_id="device-x", pin="12345", category=Category.PRINCE, candidate_number=1
    )

    board = ResultsAggregator(ResultsCache()).leaderboard(db_session)

    assert len(board) == 2 * len(Category)
    assert (board[0].category, board[0].candidate_number, board[0].vote_count) == (
        Category.COUPLE,
        2,
        3,
    )
    assert (board[1].category, board[1].vote_count) == (Category.PRINCE, 1)


def test_candidate_listing_is_cached(db_session, make_candidate) -> None:
    make_candidate(Category.PRINCESS, 2, department="Arts")
    make_candidate(Category.PRINCESS, 1, image_url="https://example.org/1.png")
    cache = ResultsCache()
    aggregator = ResultsAggregator(cache)

    listing = aggregator.candidates_for(db_session, Category.PRINCESS)

    assert [c.candidate_number for c in listing] == [1, 2]
    assert listing[0].image_url == "https://example.org/1.png"
    assert listing[1].department == "Arts"
    assert cache.size(CANDIDATES_REGION) == 1

    make_candidate(Category.PRINCESS, 3)
    assert len(aggregator.candidates_for(db_session, Category.PRINCESS)) == 2

    cache.invalidate_candidate_cache(Category.PRINCESS)
    assert len(aggregator.candidates_for(db_session, Category.PRINCESS)) == 3


def test_cache_hits_until_ttl() -> None:
    clock = FakeClock()
    cache = ResultsCache(max_entries=10, ttl_seconds=120, idle_seconds=60, clock=clock)
    calls: list[int] = []

    def loader() -> int:
        calls.append(1)
        return len(calls)

    assert cache.get_or_load(RESULTS_REGION, "k", loader) == 1
    for _ in range(4):
        clock.now += 30
        assert cache.get_or_load(RESULTS_REGION, "k", loader) == 1

    # 150s after the write; the entry is past its TTL even though it was read recently.
    clock.now += 30
    assert cache.get_or_load(RESULTS_REGION, "k", loader) == 2
    assert cache.stats.hits == 4
    assert cache.stats.misses == 2


def test_cache_expires_idle_entries() -> None:
    clock = FakeClock()
    cache = ResultsCache(max_entries=10, ttl_seconds=120, idle_seconds=60, clock=clock)
    values = iter(["first", "second"])

    cache.get_or_load(RESULTS_REGION, "k", lambda: next(values))
    clock.now += 61

    assert cache.get_or_load(RESULTS_REGION, "k", lambda: next(values)) == "second"


def test_cache_evicts_least_recently_used() -> None:
    cache = ResultsCache(max_entries=2, ttl_seconds=120, idle_seconds=60, clock=FakeClock())

    cache.get_or_load(RESULTS_REGION, "a", lambda: "a")
    cache.get_or_load(RESULTS_REGION, "b", lambda: "b")
    cache.get_or_load(RESULTS_REGION, "a", lambda: "stale")
    cache.get_or_load(RESULTS_REGION, "c", lambda: "c")

    assert cache.size(RESULTS_REGION) == 2
    assert cache.stats.evictions == 1
    assert cache.get_or_load(RESULTS_REGION, "a", lambda: "reloaded") == "a"
    assert cache.get_or_load(RESULTS_REGION, "b", lambda: "reloaded") == "reloaded"


def test_invalidation_during_load_is_not_overwritten() -> None:
    cache = ResultsCache(max_entries=10, ttl_seconds=120, idle_seconds=60, clock=FakeClock())

    def racing_loader() -> str:
        # A vote commits while the read is still computing.
        cache.invalidate_results_cache()
        return "pre-write snapshot"

    assert cache.get_or_load(RESULTS_REGION, "k", racing_loader) == "pre-write snapshot"
    assert cache.size(RESULTS_REGION) == 0
    assert cache.get_or_load(RESULTS_REGION, "k", lambda: "fresh") == "fresh"


def test_regions_are_invalidated_independently() -> None:
    cache = ResultsCache(max_entries=10, ttl_seconds=120, idle_seconds=60, clock=FakeClock())
    cache.get_or_load(RESULTS_REGION, "k", lambda: 1)
    cache.get_or_load(CANDIDATES_REGION, Category.KING, lambda: 2)
    cache.get_or_load(CANDIDATES_REGION, Category.QUEEN, lambda: 3)

    cache.invalidate_candidate_cache(Category.KING)
    assert cache.size(CANDIDATES_REGION) == 1
    assert cache.size(RESULTS_REGION) == 1

    cache.invalidate_all()
    assert cache.size(CANDIDATES_REGION) == 0
    assert cache.size(RESULTS_REGION) == 0


def test_invalidate_all_logs_cache_stats(caplog) -> None:
    cache = ResultsCache(max_entries=10, ttl_seconds=120, idle_seconds=60, clock=FakeClock())
    cache.get_or_load(RESULTS_REGION, "k", lambda: 1)
    cache.get_or_load(RESULTS_REGION, "k", lambda: 1)

    with caplog.at_level("DEBUG", logger="pageant_vote.services.cache"):
        cache.invalidate_all()

    assert "hits=1 misses=1 evictions=0" in caplog.text
