"""Tests for replies and reply vote reconciliation with atomic counters."""

import pytest
from sqlalchemy import func, select

from talent_radar.core.exceptions import (
    DuplicateReactionError,
    PermissionDeniedError,
    ReplyNotFoundError,
    ThreadLockedError,
)
from talent_radar.models import DiscussionReply, ReplyVote, VoteType
from talent_radar.repositories import ReplyRepository
from talent_radar.services import replies, threads


@pytest.fixture()
def reply(db_session, thread, other_user) -> DiscussionReply:
    return replies.create_reply(db_session, thread.id, other_user, "Yamal, easily.")


def _rows(db_session, reply_id: int, vote_type: VoteType | None = None) -> int:
    stmt = select(func.count(ReplyVote.id)).where(ReplyVote.reply_id == reply_id)
    if vote_type is not None:
        stmt = stmt.where(ReplyVote.vote_type == vote_type)
    return db_session.scalar(stmt)


def test_create_reply_updates_thread(db_session, thread, other_user) -> None:
    """Replying bumps the thread's reply count and activity time."""
    before = thread.last_activity_at

    replies.create_reply(db_session, thread.id, other_user, "  Musiala for me.  ")

    db_session.refresh(thread)
    assert thread.reply_count == 1
    assert thread.last_activity_at >= before
    stored = replies.list_thread_replies(db_session, thread.id)
    assert [item.content for item in stored] == ["Musiala for me."]


def test_reply_to_locked_thread_is_rejected(db_session, thread, other_user, moderator) -> None:
    threads.set_locked(db_session, thread.id, moderator, True)

    with pytest.raises(ThreadLockedError):
        replies.create_reply(db_session, thread.id, other_user, "Too late")

    db_session.refresh(thread)
    assert thread.reply_count == 0


def test_parent_reply_must_belong_to_thread(db_session, thread, test_user, other_user) -> None:
    """A parent from another thread is treated as missing."""
    elsewhere = threads.create_thread(db_session, test_user, "Other", "Other thread")
    foreign = replies.create_reply(db_session, elsewhere.id, other_user, "Elsewhere")

    with pytest.raises(ReplyNotFoundError):
        replies.create_reply(db_session, thread.id, other_user, "Nested", parent_reply_id=foreign.id)


def test_delete_reply_is_soft_and_decrements(db_session, thread, reply, other_user) -> None:
    replies.delete_reply(db_session, reply.id, other_user)

    db_session.refresh(thread)
    assert thread.reply_count == 0
    assert db_session.get(DiscussionReply, reply.id).is_deleted is True
    with pytest.raises(ReplyNotFoundError):
        replies.get_reply(db_session, reply.id)


def test_only_author_or_moderator_edits(db_session, reply, test_user, moderator) -> None:
    with pytest.raises(PermissionDeniedError):
        replies.update_reply(db_session, reply.id, test_user, "Hijacked")

    updated = replies.update_reply(db_session, reply.id, moderator, "Edited by staff")
    assert updated.content == "Edited by staff"


def test_author_cannot_edit_in_locked_thread(db_session, thread, reply, other_user, moderator) -> None:
    threads.set_locked(db_session, thread.id, moderator, True)

    with pytest.raises(ThreadLockedError):
        replies.update_reply(db_session, reply.id, other_user, "Edit after lock")


def test_reply_vote_lifecycle(db_session, reply, test_user) -> None:
    """Create, change, then withdraw a vote; counters follow each step."""
    created = replies.vote_on_reply(db_session, reply.id, test_user, VoteType.UPVOTE)
    db_session.refresh(reply)
    assert created is not None
    assert (reply.upvotes, reply.downvotes) == (1, 0)

    changed = replies.vote_on_reply(db_session, reply.id, test_user, VoteType.DOWNVOTE)
    db_session.refresh(reply)
    assert changed is not None and changed.vote_type == VoteType.DOWNVOTE
    assert (reply.upvotes, reply.downvotes) == (0, 1)
    assert _rows(db_session, reply.id) == 1

    withdrawn = replies.vote_on_reply(db_session, reply.id, test_user, VoteType.DOWNVOTE)
    db_session.refresh(reply)
    assert withdrawn is None
    assert (reply.upvotes, reply.downvotes) == (0, 0)
    assert _rows(db_session, reply.id) == 0


def test_reply_counters_match_rows(db_session, reply, make_user) -> None:
    voters = [make_user() for _ in range(3)]
    for voter in voters:
        replies.vote_on_reply(db_session, reply.id, voter, VoteType.UPVOTE)
    replies.vote_on_reply(db_session, reply.id, voters[0], VoteType.DOWNVOTE)
    replies.remove_reply_vote(db_session, reply.id, voters[1])

    db_session.refresh(reply)
    assert reply.upvotes == _rows(db_session, reply.id, VoteType.UPVOTE) == 1
    assert reply.downvotes == _rows(db_session, reply.id, VoteType.DOWNVOTE) == 1


def test_votes_rejected_on_locked_thread(db_session, thread, reply, test_user, moderator) -> None:
    """A locked thread freezes its replies' votes: none added, none withdrawn."""
    replies.vote_on_reply(db_session, reply.id, test_user, VoteType.UPVOTE)
    threads.set_locked(db_session, thread.id, moderator, True)

    with pytest.raises(ThreadLockedError):
        replies.vote_on_reply(db_session, reply.id, test_user, VoteType.DOWNVOTE)
    with pytest.raises(ThreadLockedError):
        replies.remove_reply_vote(db_session, reply.id, test_user)

    db_session.refresh(reply)
    assert (reply.upvotes, reply.downvotes) == (1, 0)
    assert _rows(db_session, reply.id, VoteType.UPVOTE) == 1
    assert _rows(db_session, reply.id) == 1


def test_concurrent_duplicate_reply_vote(db_session, reply, test_user, mocker) -> None:
    replies.vote_on_reply(db_session, reply.id, test_user, VoteType.UPVOTE)
    mocker.patch.object(ReplyRepository, "get_vote", return_value=None)

    with pytest.raises(DuplicateReactionError):
        replies.vote_on_reply(db_session, reply.id, test_user, VoteType.UPVOTE)

    mocker.stopall()
    db_session.refresh(reply)
    assert reply.upvotes == 1
    assert _rows(db_session, reply.id) == 1


def test_get_reply_vote(db_session, reply, test_user) -> None:
    assert replies.get_reply_vote(db_session, reply.id, test_user) is None
    replies.vote_on_reply(db_session, reply.id, test_user, VoteType.UPVOTE)
    assert replies.get_reply_vote(db_session, reply.id, test_user) == VoteType.UPVOTE
