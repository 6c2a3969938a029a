"""Polls: creation, results, vote reconciliation and expiry.

Three voting modes share one rule set. Anonymous polls key the voter by
client address and accept exactly one vote per address, which can be
neither changed nor withdrawn. Identified single-choice polls hold one
selection per user: choosing the selected option again withdraws it and
choosing another option moves it. Identified multiple-choice polls toggle
each option independently.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from talent_radar.core.exceptions import (
    AlreadyVotedError,
    DuplicateReactionError,
    InvalidRequestError,
    InvalidStateError,
    PermissionDeniedError,
    PlayerNotFoundError,
    PollClosedError,
    PollNotFoundError,
    PollOptionNotFoundError,
    ThreadNotFoundError,
)
from talent_radar.db.time import as_utc, utcnow
from talent_radar.db.unit_of_work import unit_of_work
from talent_radar.models import Poll, PollOption, PollType, PollVote, User
from talent_radar.repositories import PlayerRepository, PollRepository, ThreadRepository
from talent_radar.services.notifications import NotificationDispatcher
from talent_radar.services.reactions import ReactionChange, increment, reconcile, require

__all__ = [
    "MIN_OPTIONS",
    "OptionResult",
    "PollResults",
    "create_poll",
    "get_poll",
    "list_active_polls",
    "list_most_popular_polls",
    "get_results",
    "vote_on_poll",
    "remove_poll_vote",
    "get_voted_option_ids",
    "close_poll",
    "expire_polls",
]

logger = logging.getLogger(__name__)

MIN_OPTIONS = 2


@dataclass(frozen=True)
class OptionResult:
    option_id: int
    option_text: str
    vote_count: int
    percentage: float


@dataclass(frozen=True)
class PollResults:
    poll_id: int
    question: str
    total_votes: int
    is_active: bool
    options: list[OptionResult]
    winning_option_id: int | None


def get_poll(db: Session, poll_id: int) -> Poll:
    poll = PollRepository(db).get(poll_id)
    if poll is None:
        raise PollNotFoundError(poll_id)
    return poll


def create_poll(
    db: Session,
    author: User,
    question: str,
    options: list[str],
    poll_type: PollType = PollType.SINGLE_CHOICE,
    description: str | None = None,
    is_anonymous: bool = False,
    expires_at: datetime | None = None,
    thread_id: int | None = None,
    player_id: int | None = None,
) -> Poll:
    """Create a poll with its options and notify the author's followers.

    Raises:
        InvalidRequestError: If the question is blank, fewer than two non-blank
            options are given, or the expiry is not in the future.
        ThreadNotFoundError: If ``thread_id`` does not exist.
        PlayerNotFoundError: If ``player_id`` does not exist.
    """
    cleaned_question = (question or "").strip()
    if not cleaned_question:
        raise InvalidRequestError("Poll question cannot be empty")
    cleaned_options = [option.strip() for option in options or [] if option and option.strip()]
    if len(cleaned_options) < MIN_OPTIONS:
        raise InvalidRequestError(f"A poll needs at least {MIN_OPTIONS} options")
    if expires_at is not None and as_utc(expires_at) <= utcnow():
        raise InvalidRequestError("Poll expiry must be in the future")
    if thread_id is not None and ThreadRepository(db).get(thread_id) is None:
        raise ThreadNotFoundError(thread_id)
    if player_id is not None and PlayerRepository(db).get(player_id) is None:
        raise PlayerNotFoundError(player_id)

    poll = Poll(
        author_id=author.id,
        question=cleaned_question,
        description=(description or "").strip() or None,
        poll_type=poll_type,
        is_anonymous=is_anonymous,
        expires_at=expires_at,
        thread_id=thread_id,
        player_id=player_id,
        options=[
            PollOption(option_text=text, display_order=index)
            for index, text in enumerate(cleaned_options)
        ],
    )
    with unit_of_work(db, "create poll"):
        PollRepository(db).add(poll)
    logger.info(
        "User %s created poll %s with %d options", author.id, poll.id, len(cleaned_options)
    )

    NotificationDispatcher(db).notify_followers_of_new_poll(poll, author)
    return poll


def list_active_polls(db: Session, limit: int = 20, offset: int = 0) -> list[Poll]:
    return PollRepository(db).list_active(utcnow(), limit, offset)


def list_most_popular_polls(db: Session, limit: int = 10) -> list[Poll]:
    return PollRepository(db).list_most_popular(limit)


def get_results(db: Session, poll_id: int) -> PollResults:
    """Summarize a poll: per-option counts and shares, plus the leading option.

    Percentages are rounded to one decimal. Ties for the lead go to the
    option listed first; a poll without votes has no winner.
    """
    poll = get_poll(db, poll_id)
    total = poll.total_votes or 0
    options = [
        OptionResult(
            option_id=option.id,
            option_text=option.option_text,
            vote_count=option.vote_count,
            percentage=round(option.vote_count * 100.0 / total, 1) if total else 0.0,
        )
        for option in poll.options
    ]
    winner = None
    if total:
        leader = max(options, key=lambda result: result.vote_count)
        if leader.vote_count > 0:
            winner = leader.option_id
    return PollResults(
        poll_id=poll.id,
        question=poll.question,
        total_votes=total,
        is_active=poll.accepts_votes(),
        options=options,
        winning_option_id=winner,
    )


def _ensure_open(poll: Poll) -> None:
    if not poll.is_active:
        raise PollClosedError(poll.id, "inactive")
    if poll.is_expired():
        raise PollClosedError(poll.id, "expired")


def _resolve(db: Session, poll_id: int, option_id: int) -> tuple[Poll, PollOption]:
    repo = PollRepository(db)
    poll = repo.get(poll_id)
    if poll is None:
        raise PollNotFoundError(poll_id)
    option = repo.get_option(poll_id, option_id)
    if option is None:
        raise PollOptionNotFoundError(option_id, poll_id)
    return poll, option


def vote_on_poll(
    db: Session,
    poll_id: int,
    option_id: int,
    user: User | None = None,
    ip_address: str | None = None,
) -> PollVote | None:
    """Apply a vote for ``option_id`` on ``poll_id``.

    Args:
        db: Database session.
        poll_id: Poll being voted on.
        option_id: Selected option, which must belong to the poll.
        user: The voter on identified polls.
        ip_address: The voter's address on anonymous polls.

    Returns:
        The stored vote, or ``None`` when the vote was withdrawn.

    Raises:
        InvalidRequestError: If an id is missing, or an anonymous vote has no address.
        PermissionDeniedError: If an identified poll is voted on without a user.
        PollNotFoundError: If the poll does not exist.
        PollOptionNotFoundError: If the option is not part of the poll.
        PollClosedError: If the poll is inactive or expired.
        AlreadyVotedError: If the address already voted on an anonymous poll.
        DuplicateReactionError: If a concurrent request stored the same vote first.
    """
    require(poll_id=poll_id, option_id=option_id)
    poll, option = _resolve(db, poll_id, option_id)
    _ensure_open(poll)

    def conflict() -> DuplicateReactionError:
        return DuplicateReactionError("poll", poll_id)

    if poll.is_anonymous:
        if not ip_address:
            raise InvalidRequestError("A client address is required to vote on anonymous polls")
        return _vote_anonymously(db, poll, option, ip_address, conflict)

    if user is None:
        raise PermissionDeniedError("Sign in to vote on this poll")
    repo = PollRepository(db)
    with unit_of_work(db, "poll vote", on_conflict=conflict):
        if poll.poll_type == PollType.MULTIPLE_CHOICE:
            existing = repo.user_vote_on_option(option.id, user.id)
        else:
            existing = repo.user_vote_on_poll(poll.id, user.id)
        change = reconcile(existing.poll_option_id if existing else None, option.id)

        result: PollVote | None
        if existing is None:
            result = repo.add_vote(
                PollVote(poll_id=poll.id, poll_option_id=option.id, user_id=user.id)
            )
            # The unique key covers (option, user) only; one vote per user per
            # single-choice poll is checked against the flushed rows.
            if poll.poll_type == PollType.SINGLE_CHOICE and len(
                repo.user_votes(poll.id, user.id)
            ) > 1:
                logger.warning("Concurrent vote by user %s on poll %s", user.id, poll.id)
                raise conflict()
            increment(option, "vote_count", 1)
            increment(poll, "total_votes", 1)
        elif change is ReactionChange.REMOVED:
            repo.delete_vote(existing)
            increment(option, "vote_count", -1)
            increment(poll, "total_votes", -1)
            result = None
        else:
            previous = repo.get_option(poll.id, existing.poll_option_id)
            if previous is not None:
                increment(previous, "vote_count", -1)
            existing.poll_option_id = option.id
            increment(option, "vote_count", 1)
            result = existing

    logger.info(
        "Poll %s vote by user %s %s (option %s)", poll_id, user.id, change.value, option_id
    )
    return result


def _vote_anonymously(
    db: Session,
    poll: Poll,
    option: PollOption,
    ip_address: str,
    conflict: Callable[[], DuplicateReactionError],
) -> PollVote:
    repo = PollRepository(db)
    if repo.address_votes(poll.id, ip_address):
        logger.warning("Address %s tried to vote twice on anonymous poll %s", ip_address, poll.id)
        raise AlreadyVotedError(poll.id)
    with unit_of_work(db, "anonymous poll vote", on_conflict=conflict):
        vote = repo.add_vote(
            PollVote(poll_id=poll.id, poll_option_id=option.id, ip_address=ip_address)
        )
        increment(option, "vote_count", 1)
        increment(poll, "total_votes", 1)
    logger.info("Anonymous vote on poll %s (option %s)", poll.id, option.id)
    return vote


def remove_poll_vote(
    db: Session, poll_id: int, user: User, option_id: int | None = None
) -> int:
    """Withdraw the user's votes on an identified poll, or only the one on ``option_id``.

    Returns:
        The number of votes removed.

    Raises:
        InvalidStateError: If the poll is anonymous, or closed.
    """
    poll = get_poll(db, poll_id)
    if poll.is_anonymous:
        raise InvalidStateError(
            f"Cannot remove a vote on anonymous poll {poll_id}",
            details="Votes on anonymous polls cannot be changed",
        )
    _ensure_open(poll)
    repo = PollRepository(db)
    votes = repo.user_votes(poll_id, user.id)
    if option_id is not None:
        votes = [vote for vote in votes if vote.poll_option_id == option_id]
    if not votes:
        return 0

    with unit_of_work(db, "remove poll vote"):
        for vote in votes:
            option = repo.get_option(poll_id, vote.poll_option_id)
            if option is not None:
                increment(option, "vote_count", -1)
            repo.delete_vote(vote)
        increment(poll, "total_votes", -len(votes))
    logger.info("Removed %d vote(s) by user %s on poll %s", len(votes), user.id, poll_id)
    return len(votes)


def get_voted_option_ids(
    db: Session, poll_id: int, user: User | None = None, ip_address: str | None = None
) -> list[int]:
    """Options the caller currently holds a vote on; by address on anonymous polls."""
    poll = get_poll(db, poll_id)
    repo = PollRepository(db)
    if poll.is_anonymous:
        votes = repo.address_votes(poll_id, ip_address) if ip_address else []
    else:
        votes = repo.user_votes(poll_id, user.id) if user is not None else []
    return sorted(vote.poll_option_id for vote in votes)


def close_poll(db: Session, poll_id: int, user: User) -> Poll:
    poll = get_poll(db, poll_id)
    if poll.author_id != user.id and not user.can_moderate:
        raise PermissionDeniedError("Only the poll author or a moderator can close this poll")
    with unit_of_work(db, "close poll"):
        poll.is_active = False
    logger.info("User %s closed poll %s", user.id, poll_id)
    return poll


def expire_polls(db: Session, now: datetime | None = None) -> int:
    """Deactivate every active poll whose expiry has passed and return how many."""
    with unit_of_work(db, "expire polls"):
        expired = PollRepository(db).deactivate_expired(now or utcnow())
    if expired:
        logger.info("Expired %d poll(s)", expired)
    else:
        logger.debug("No polls to expire")
    return expired
