# src/pageant_vote/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .candidates import router as candidates_router
from .results import router as results_router
from .voting import router as voting_router

__all__ = [
    "admin_router",
    "auth_router",
    "candidates_router",
    "results_router",
    "voting_router",
]
