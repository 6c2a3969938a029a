"""Discussion threads: creation, listing, moderation flags and view counting."""
from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from talent_radar.core.exceptions import (
    CategoryNotFoundError,
    InvalidRequestError,
    PermissionDeniedError,
    PlayerNotFoundError,
    ThreadNotFoundError,
)
from talent_radar.core.settings import settings
from talent_radar.db.time import utcnow
from talent_radar.db.unit_of_work import unit_of_work
from talent_radar.models import DiscussionCategory, DiscussionThread, ThreadType, User
from talent_radar.repositories import PlayerRepository, ThreadRepository
from talent_radar.services.notifications import NotificationDispatcher
from talent_radar.services.reactions import increment

__all__ = [
    "MAX_TITLE_LENGTH",
    "create_thread",
    "get_thread",
    "list_categories",
    "list_threads",
    "list_pinned_threads",
    "list_trending_threads",
    "search_threads",
    "update_thread",
    "record_thread_view",
    "set_pinned",
    "set_locked",
    "set_featured",
]

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200


def _clean_title(title: str | None) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise InvalidRequestError("Thread title cannot be empty")
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise InvalidRequestError(f"Thread title cannot exceed {MAX_TITLE_LENGTH} characters")
    return cleaned


def _clean_content(content: str | None) -> str:
    cleaned = (content or "").strip()
    if not cleaned:
        raise InvalidRequestError("Thread content cannot be empty")
    return cleaned


def get_thread(db: Session, thread_id: int) -> DiscussionThread:
    thread = ThreadRepository(db).get(thread_id)
    if thread is None:
        raise ThreadNotFoundError(thread_id)
    return thread


def list_categories(db: Session) -> list[DiscussionCategory]:
    return ThreadRepository(db).list_categories()


def create_thread(
    db: Session,
    author: User,
    title: str,
    content: str,
    thread_type: ThreadType = ThreadType.GENERAL,
    category_id: int | None = None,
    player_id: int | None = None,
) -> DiscussionThread:
    """Open a discussion thread and tell the author's followers about it.

    Raises:
        InvalidRequestError: If the title or content is blank, or the title is too long.
        CategoryNotFoundError: If ``category_id`` does not exist.
        PlayerNotFoundError: If ``player_id`` does not exist.
    """
    cleaned_title = _clean_title(title)
    cleaned_content = _clean_content(content)
    repo = ThreadRepository(db)
    if category_id is not None and repo.get_category(category_id) is None:
        raise CategoryNotFoundError(category_id)
    if player_id is not None and PlayerRepository(db).get(player_id) is None:
        raise PlayerNotFoundError(player_id)

    with unit_of_work(db, "create thread"):
        thread = repo.add(
            DiscussionThread(
                author_id=author.id,
                title=cleaned_title,
                content=cleaned_content,
                thread_type=thread_type,
                category_id=category_id,
                player_id=player_id,
                last_activity_at=utcnow(),
            )
        )
    logger.info("User %s created thread %s (%s)", author.id, thread.id, thread_type.value)

    NotificationDispatcher(db).notify_followers_of_new_thread(thread, author)
    return thread


def list_threads(
    db: Session, category_id: int | None = None, limit: int = 20, offset: int = 0
) -> list[DiscussionThread]:
    """Threads by most recent activity, pinned threads first."""
    return ThreadRepository(db).list_recent(category_id, limit, offset)


def list_pinned_threads(db: Session) -> list[DiscussionThread]:
    return ThreadRepository(db).list_pinned()


def list_trending_threads(db: Session, limit: int = 10) -> list[DiscussionThread]:
    """Threads active within the trending window, by views then replies."""
    since = utcnow() - timedelta(days=settings.trending_window_days)
    return ThreadRepository(db).list_active_since(since, limit)


def search_threads(
    db: Session, query: str, limit: int = 20, offset: int = 0
) -> list[DiscussionThread]:
    term = (query or "").strip()
    if not term:
        raise InvalidRequestError("Search query cannot be empty")
    logger.debug("Searching threads for %r", term)
    return ThreadRepository(db).search(term, limit, offset)


def update_thread(
    db: Session,
    thread_id: int,
    user: User,
    title: str | None = None,
    content: str | None = None,
) -> DiscussionThread:
    thread = get_thread(db, thread_id)
    if thread.author_id != user.id and not user.can_moderate:
        raise PermissionDeniedError("You can only edit your own threads")
    cleaned_title = _clean_title(title) if title is not None else None
    cleaned_content = _clean_content(content) if content is not None else None

    with unit_of_work(db, "update thread"):
        if cleaned_title is not None:
            thread.title = cleaned_title
        if cleaned_content is not None:
            thread.content = cleaned_content
        thread.last_activity_at = utcnow()
    logger.info("User %s edited thread %s", user.id, thread_id)
    return thread


def record_thread_view(db: Session, thread_id: int) -> DiscussionThread:
    thread = get_thread(db, thread_id)
    with unit_of_work(db, "record thread view"):
        increment(thread, "view_count", 1)
        thread.last_activity_at = utcnow()
    return thread


def _require_moderator(user: User, action: str) -> None:
    if not user.can_moderate:
        raise PermissionDeniedError(f"Only moderators can {action} threads")


def set_pinned(db: Session, thread_id: int, user: User, pinned: bool) -> DiscussionThread:
    _require_moderator(user, "pin" if pinned else "unpin")
    thread = get_thread(db, thread_id)
    with unit_of_work(db, "pin thread"):
        thread.is_pinned = pinned
    logger.info("User %s set pinned=%s on thread %s", user.id, pinned, thread_id)
    return thread


def set_locked(db: Session, thread_id: int, user: User, locked: bool) -> DiscussionThread:
    _require_moderator(user, "lock" if locked else "unlock")
    thread = get_thread(db, thread_id)
    with unit_of_work(db, "lock thread"):
        thread.is_locked = locked
    logger.info("User %s set locked=%s on thread %s", user.id, locked, thread_id)
    return thread


def set_featured(db: Session, thread_id: int, user: User, featured: bool) -> DiscussionThread:
    if not user.is_admin:
        raise PermissionDeniedError("Only administrators can feature threads")
    thread = get_thread(db, thread_id)
    with unit_of_work(db, "feature thread"):
        thread.is_featured = featured
    logger.info("User %s set featured=%s on thread %s", user.id, featured, thread_id)
    return thread
