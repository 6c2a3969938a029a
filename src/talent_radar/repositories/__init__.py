"""Repository layer wrapping SQLAlchemy queries per aggregate."""

from .comments import CommentRepository
from .discussions import ReplyRepository, ThreadRepository
from .notifications import NotificationRepository
from .players import PlayerRepository
from .polls import PollRepository
from .ratings import RatingRepository
from .users import UserRepository

__all__ = [
    "CommentRepository",
    "NotificationRepository",
    "PlayerRepository",
    "PollRepository",
    "RatingRepository",
    "ReplyRepository",
    "ThreadRepository",
    "UserRepository",
]
