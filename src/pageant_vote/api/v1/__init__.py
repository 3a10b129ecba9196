# src/pageant_vote/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    candidates_router,
    results_router,
    voting_router,
)

__all__ = [
    "admin_router",
    "auth_router",
    "candidates_router",
    "results_router",
    "voting_router",
]
