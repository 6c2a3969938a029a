"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .discussions import router as discussions_router
from .notifications import router as notifications_router
from .players import router as players_router
from .polls import router as polls_router
from .ratings import router as ratings_router

__all__ = [
    "comments_router",
    "discussions_router",
    "notifications_router",
    "players_router",
    "polls_router",
    "ratings_router",
]
