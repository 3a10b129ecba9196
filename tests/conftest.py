# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"

from pageant_vote.db.session import Base, build_engine
from pageant_vote.db.session import get_db as app_get_session
from pageant_vote.main import app as fastapi_app
from pageant_vote.models import Candidate, Category
from pageant_vote.services.cache import ResultsCache
from pageant_vote.services.rate_limit import RateLimiter

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    # The voting service commits and rolls back on its own, so tests run
    # against real transactions and wipe the tables afterwards.
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def file_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """A file-backed SQLite engine where every session gets its own connection."""
    engine = build_engine(f"sqlite:///{tmp_path / 'votes.db'}", poolclass=NullPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture(autouse=True)
def fresh_app_state(app: FastAPI) -> Iterator[None]:
    """Give every test its own rate limiter and cache."""
    app.state.rate_limiter = RateLimiter()
    app.state.results_cache = ResultsCache()
    yield


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_candidate(db_session: Session) -> Callable[..., Candidate]:
    """Return a factory that persists a candidate and returns it."""

    def _make(category: Category, number: int, name: str | None = None, **extra) -> Candidate:
        candidate = Candidate(
            category=category,
            candidate_number=number,
            name=name or f"{category.value.title()} #{number}",
            vote_count=0,
            **extra,
        )
        db_session.add(candidate)
        db_session.commit()
        db_session.refresh(candidate)
        return candidate

    return _make


@pytest.fixture()
def full_ballot(make_candidate: Callable[..., Candidate]) -> dict[Category, list[Candidate]]:
    """Two candidates in every category."""
    return {
        category: [make_candidate(category, 1), make_candidate(category, 2)]
        for category in Category
    }