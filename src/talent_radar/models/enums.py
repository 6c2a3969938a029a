"""Closed vocabularies shared by models, schemas and services."""

import enum


class UserRole(str, enum.Enum):
    USER = "USER"
    SCOUT = "SCOUT"
    COACH = "COACH"
    ADMIN = "ADMIN"


class VoteType(str, enum.Enum):
    """Reaction kinds for comments and replies."""

    UPVOTE = "UPVOTE"
    DOWNVOTE = "DOWNVOTE"


class PollType(str, enum.Enum):
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"


class ThreadType(str, enum.Enum):
    GENERAL = "GENERAL"
    PLAYER_COMPARISON = "PLAYER_COMPARISON"
    MATCH_PERFORMANCE = "MATCH_PERFORMANCE"
    TRANSFER_SPECULATION = "TRANSFER_SPECULATION"
    SCOUT_REPORT = "SCOUT_REPORT"
    RISING_STARS = "RISING_STARS"
    POLL = "POLL"


class NotificationType(str, enum.Enum):
    REPLY = "REPLY"
    COMMENT_REPLY = "COMMENT_REPLY"
    THREAD = "THREAD"
    POLL = "POLL"
    RATING = "RATING"
    FOLLOW = "FOLLOW"
    SYSTEM = "SYSTEM"
