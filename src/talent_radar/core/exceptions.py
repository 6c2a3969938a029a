"""Custom exception classes for the Talent Radar backend."""


class TalentRadarError(Exception):
    """Base exception for all Talent Radar domain errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class InvalidRequestError(TalentRadarError):
    """Raised when a caller supplies missing or out-of-range arguments."""


class NotFoundError(TalentRadarError):
    """Raised when a referenced entity does not exist."""

    entity = "Entity"

    def __init__(self, entity_id: object, details: str | None = None):
        super().__init__(
            message=f"{self.entity} not found with ID: {entity_id}",
            details=details or f"The requested {self.entity.lower()} does not exist",
        )
        self.entity_id = entity_id


class UserNotFoundError(NotFoundError):
    entity = "User"


class PlayerNotFoundError(NotFoundError):
    entity = "Player"


class CommentNotFoundError(NotFoundError):
    entity = "Comment"


class CategoryNotFoundError(NotFoundError):
    entity = "Category"


class ThreadNotFoundError(NotFoundError):
    entity = "Thread"


class ReplyNotFoundError(NotFoundError):
    entity = "Reply"


class PollNotFoundError(NotFoundError):
    entity = "Poll"


class PollOptionNotFoundError(NotFoundError):
    entity = "Poll option"

    def __init__(self, option_id: object, poll_id: object | None = None):
        details = None
        if poll_id is not None:
            details = f"The option does not belong to poll {poll_id}"
        super().__init__(option_id, details=details)
        self.poll_id = poll_id


class RatingNotFoundError(NotFoundError):
    entity = "Rating"


class RatingCategoryNotFoundError(NotFoundError):
    entity = "Rating category"


class NotificationNotFoundError(NotFoundError):
    entity = "Notification"


class InvalidStateError(TalentRadarError):
    """Raised when the target exists but cannot accept the operation right now."""


class ThreadLockedError(InvalidStateError):
    """Raised when replying to, or editing inside, a locked thread."""

    def __init__(self, thread_id: int):
        super().__init__(
            message=f"Thread {thread_id} is locked",
            details="Locked threads do not accept new replies or votes",
        )
        self.thread_id = thread_id


class PollClosedError(InvalidStateError):
    """Raised when voting on an inactive or expired poll."""

    def __init__(self, poll_id: int, reason: str):
        super().__init__(
            message=f"Cannot vote on {reason} poll {poll_id}",
            details="This poll is not accepting votes",
        )
        self.poll_id = poll_id
        self.reason = reason


class AlreadyVotedError(InvalidStateError):
    """Raised when an anonymous voter tries to vote on the same poll twice."""

    def __init__(self, poll_id: int):
        super().__init__(
            message=f"You have already voted on poll {poll_id}",
            details="Votes on anonymous polls cannot be changed",
        )
        self.poll_id = poll_id


class DuplicateReactionError(InvalidStateError):
    """Raised when a concurrent request already recorded a vote for the same voter."""

    def __init__(self, subject: str, subject_id: int):
        super().__init__(
            message=f"A vote on {subject} {subject_id} was recorded concurrently",
            details="Retry the request to apply your reaction to the current state",
        )
        self.subject = subject
        self.subject_id = subject_id


class PermissionDeniedError(TalentRadarError):
    """Raised when the acting user lacks the rights for an operation."""


class StorageError(TalentRadarError):
    """Raised when the database fails underneath a service operation."""

    def __init__(self, operation: str, original_error: Exception | None = None):
        message = f"Storage error during {operation}"
        if original_error:
            message += f": {original_error}"
        super().__init__(
            message=message,
            details="The operation could not be completed",
        )
        self.operation = operation
        self.original_error = original_error
