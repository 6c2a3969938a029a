"""Tests for poll voting across anonymous, single-choice and multiple-choice polls."""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from talent_radar.core.exceptions import (
    AlreadyVotedError,
    DuplicateReactionError,
    InvalidRequestError,
    InvalidStateError,
    PermissionDeniedError,
    PollClosedError,
    PollOptionNotFoundError,
)
from talent_radar.db.time import utcnow
from talent_radar.models import PollType, PollVote
from talent_radar.repositories import PollRepository
from talent_radar.services import polls


def _rows(db_session, poll_id: int) -> int:
    return db_session.scalar(select(func.count(PollVote.id)).where(PollVote.poll_id == poll_id))


def _counts(db_session, poll) -> tuple[int, list[int]]:
    db_session.refresh(poll)
    for option in poll.options:
        db_session.refresh(option)
    return poll.total_votes, [option.vote_count for option in poll.options]


def test_anonymous_vote_is_keyed_by_address(db_session, make_poll) -> None:
    """One address votes once; a second vote from it is rejected."""
    poll = make_poll(is_anonymous=True)
    first, second = poll.options[0], poll.options[1]

    vote = polls.vote_on_poll(db_session, poll.id, first.id, ip_address="1.2.3.4")

    assert vote is not None
    assert vote.user_id is None
    assert vote.ip_address == "1.2.3.4"
    assert _counts(db_session, poll) == (1, [1, 0, 0])

    with pytest.raises(AlreadyVotedError):
        polls.vote_on_poll(db_session, poll.id, second.id, ip_address="1.2.3.4")
    assert _counts(db_session, poll) == (1, [1, 0, 0])
    assert _rows(db_session, poll.id) == 1


def test_anonymous_repeat_on_same_option_is_rejected(db_session, make_poll) -> None:
    """Anonymous votes cannot be withdrawn by repeating them."""
    poll = make_poll(is_anonymous=True)
    option = poll.options[0]
    polls.vote_on_poll(db_session, poll.id, option.id, ip_address="1.2.3.4")

    with pytest.raises(AlreadyVotedError):
        polls.vote_on_poll(db_session, poll.id, option.id, ip_address="1.2.3.4")
    assert _counts(db_session, poll) == (1, [1, 0, 0])


def test_anonymous_vote_from_another_address(db_session, make_poll) -> None:
    poll = make_poll(is_anonymous=True)
    polls.vote_on_poll(db_session, poll.id, poll.options[0].id, ip_address="1.2.3.4")
    polls.vote_on_poll(db_session, poll.id, poll.options[0].id, ip_address="5.6.7.8")

    assert _counts(db_session, poll) == (2, [2, 0, 0])


def test_anonymous_vote_needs_an_address(db_session, make_poll) -> None:
    poll = make_poll(is_anonymous=True)
    with pytest.raises(InvalidRequestError):
        polls.vote_on_poll(db_session, poll.id, poll.options[0].id)


def test_anonymous_vote_cannot_be_removed(db_session, make_poll, test_user) -> None:
    poll = make_poll(is_anonymous=True)
    with pytest.raises(InvalidStateError):
        polls.remove_poll_vote(db_session, poll.id, test_user)


@pytest.mark.parametrize(
    "poll_kwargs",
    [
        {"expires_in": timedelta(hours=-1)},
        {"is_active": False},
    ],
    ids=["expired", "inactive"],
)
def test_closed_poll_rejects_votes(db_session, make_poll, test_user, poll_kwargs) -> None:
    """Expired or inactive polls reject votes and keep their counters."""
    poll = make_poll(**poll_kwargs)

    with pytest.raises(PollClosedError):
        polls.vote_on_poll(db_session, poll.id, poll.options[0].id, user=test_user)

    assert _counts(db_session, poll) == (0, [0, 0, 0])
    assert _rows(db_session, poll.id) == 0


def test_closed_anonymous_poll_rejects_votes(db_session, make_poll) -> None:
    poll = make_poll(is_anonymous=True, expires_in=timedelta(minutes=-5))

    with pytest.raises(PollClosedError):
        polls.vote_on_poll(db_session, poll.id, poll.options[0].id, ip_address="1.2.3.4")


def test_option_must_belong_to_poll(db_session, make_poll, test_user) -> None:
    poll = make_poll()
    other = make_poll()

    with pytest.raises(PollOptionNotFoundError):
        polls.vote_on_poll(db_session, poll.id, other.options[0].id, user=test_user)


def test_identified_poll_requires_user(db_session, make_poll) -> None:
    poll = make_poll()
    with pytest.raises(PermissionDeniedError):
        polls.vote_on_poll(db_session, poll.id, poll.options[0].id, ip_address="1.2.3.4")


def test_single_choice_moves_and_withdraws(db_session, make_poll, test_user) -> None:
    """Voting another option moves the vote; voting it again withdraws it."""
    poll = make_poll()
    first, second = poll.options[0], poll.options[1]

    polls.vote_on_poll(db_session, poll.id, first.id, user=test_user)
    assert _counts(db_session, poll) == (1, [1, 0, 0])

    moved = polls.vote_on_poll(db_session, poll.id, second.id, user=test_user)
    assert moved is not None and moved.poll_option_id == second.id
    assert _counts(db_session, poll) == (1, [0, 1, 0])
    assert _rows(db_session, poll.id) == 1

    withdrawn = polls.vote_on_poll(db_session, poll.id, second.id, user=test_user)
    assert withdrawn is None
    assert _counts(db_session, poll) == (0, [0, 0, 0])
    assert _rows(db_session, poll.id) == 0


def test_concurrent_single_choice_vote_is_rejected(db_session, make_poll, test_user, mocker) -> None:
    """A second selection slipping past the lookup is rolled back."""
    poll = make_poll()
    first, second = poll.options[0], poll.options[1]
    polls.vote_on_poll(db_session, poll.id, first.id, user=test_user)
    mocker.patch.object(PollRepository, "user_vote_on_poll", return_value=None)

    with pytest.raises(DuplicateReactionError):
        polls.vote_on_poll(db_session, poll.id, second.id, user=test_user)

    mocker.stopall()
    assert _counts(db_session, poll) == (1, [1, 0, 0])
    assert _rows(db_session, poll.id) == 1
    assert polls.get_voted_option_ids(db_session, poll.id, user=test_user) == [first.id]


def test_multiple_choice_toggles_each_option(db_session, make_poll, test_user) -> None:
    poll = make_poll(poll_type=PollType.MULTIPLE_CHOICE)
    first, second, third = poll.options

    polls.vote_on_poll(db_session, poll.id, first.id, user=test_user)
    polls.vote_on_poll(db_session, poll.id, third.id, user=test_user)
    assert _counts(db_session, poll) == (2, [1, 0, 1])
    assert polls.get_voted_option_ids(db_session, poll.id, user=test_user) == sorted(
        [first.id, third.id]
    )

    polls.vote_on_poll(db_session, poll.id, first.id, user=test_user)
    assert _counts(db_session, poll) == (1, [0, 0, 1])
    assert _rows(db_session, poll.id) == 1


def test_remove_poll_vote(db_session, make_poll, test_user, other_user) -> None:
    poll = make_poll(poll_type=PollType.MULTIPLE_CHOICE)
    first, second, _ = poll.options
    polls.vote_on_poll(db_session, poll.id, first.id, user=test_user)
    polls.vote_on_poll(db_session, poll.id, second.id, user=test_user)
    polls.vote_on_poll(db_session, poll.id, second.id, user=other_user)

    assert polls.remove_poll_vote(db_session, poll.id, test_user, option_id=second.id) == 1
    assert _counts(db_session, poll) == (2, [1, 1, 0])
    assert polls.remove_poll_vote(db_session, poll.id, test_user) == 1
    assert polls.remove_poll_vote(db_session, poll.id, test_user) == 0
    assert _counts(db_session, poll) == (1, [0, 1, 0])


def test_results_report_shares_and_winner(db_session, make_poll, make_user) -> None:
    poll = make_poll()
    first, second, _ = poll.options
    for _ in range(2):
        polls.vote_on_poll(db_session, poll.id, first.id, user=make_user())
    polls.vote_on_poll(db_session, poll.id, second.id, user=make_user())

    results = polls.get_results(db_session, poll.id)

    assert results.total_votes == 3
    assert [item.vote_count for item in results.options] == [2, 1, 0]
    assert [item.percentage for item in results.options] == [66.7, 33.3, 0.0]
    assert results.winning_option_id == first.id
    assert results.is_active is True


def test_results_without_votes_have_no_winner(db_session, make_poll) -> None:
    results = polls.get_results(db_session, make_poll().id)
    assert results.winning_option_id is None
    assert all(item.percentage == 0.0 for item in results.options)


def test_create_poll_validation(db_session, test_user) -> None:
    with pytest.raises(InvalidRequestError):
        polls.create_poll(db_session, test_user, "  ", ["A", "B"])
    with pytest.raises(InvalidRequestError):
        polls.create_poll(db_session, test_user, "Who?", ["Only one", "   "])
    with pytest.raises(InvalidRequestError):
        polls.create_poll(
            db_session, test_user, "Who?", ["A", "B"], expires_at=utcnow() - timedelta(hours=1)
        )


def test_create_poll_orders_options(db_session, test_user) -> None:
    poll = polls.create_poll(
        db_session,
        test_user,
        "Best finisher?",
        [" Haaland ", "Mbappe", "Kane"],
        expires_at=utcnow() + timedelta(days=3),
    )

    assert [option.option_text for option in poll.options] == ["Haaland", "Mbappe", "Kane"]
    assert [option.display_order for option in poll.options] == [0, 1, 2]
    assert poll.is_active is True


def test_close_poll_permissions(db_session, make_poll, other_user, moderator) -> None:
    poll = make_poll()
    with pytest.raises(PermissionDeniedError):
        polls.close_poll(db_session, poll.id, other_user)

    closed = polls.close_poll(db_session, poll.id, moderator)
    assert closed.is_active is False
