"""SQLAlchemy models for the Talent Radar application."""

from .comment import PlayerComment, PlayerCommentVote
from .discussion import DiscussionCategory, DiscussionReply, DiscussionThread, ReplyVote
from .enums import NotificationType, PollType, ThreadType, UserRole, VoteType
from .notification import Notification
from .player import Player, PlayerView
from .poll import Poll, PollOption, PollVote
from .rating import PlayerRating, RatingCategory
from .user import User, UserFollow

__all__ = [
    "PlayerComment", "PlayerCommentVote",
    "DiscussionCategory", "DiscussionThread", "DiscussionReply", "ReplyVote",
    "NotificationType", "PollType", "ThreadType", "UserRole", "VoteType",
    "Notification",
    "Player", "PlayerView",
    "Poll", "PollOption", "PollVote",
    "PlayerRating", "RatingCategory",
    "User", "UserFollow",
]
