"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    discussions_router,
    notifications_router,
    players_router,
    polls_router,
    ratings_router,
)

__all__ = [
    "players_router",
    "comments_router",
    "discussions_router",
    "polls_router",
    "ratings_router",
    "notifications_router",
]
