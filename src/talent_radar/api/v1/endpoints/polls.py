"""Poll endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from talent_radar.api.v1.dependencies import (
    ClientIpDep,
    CurrentUserDep,
    LimitQuery,
    OffsetQuery,
    OptionalUserDep,
    SessionDep,
)
from talent_radar.core.settings import settings
from talent_radar.schemas.common import Removed
from talent_radar.schemas.polls import (
    MyPollVotes,
    PollCreate,
    PollResponse,
    PollResultsResponse,
    PollVoteRequest,
    PollVoteResult,
)
from talent_radar.services import polls

router = APIRouter(prefix="/polls", tags=["polls"])


@router.get("", response_model=list[PollResponse])
async def list_active_polls(
    db: SessionDep,
    limit: LimitQuery = settings.default_page_size,
    offset: OffsetQuery = 0,
) -> list[PollResponse]:
    """List polls that still accept votes, newest first."""
    items = polls.list_active_polls(db, limit=limit, offset=offset)
    return [PollResponse.model_validate(item) for item in items]


@router.post("", response_model=PollResponse, status_code=status.HTTP_201_CREATED)
async def create_poll(
    payload: PollCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PollResponse:
    poll = polls.create_poll(
        db,
        current_user,
        payload.question,
        payload.options,
        poll_type=payload.poll_type,
        description=payload.description,
        is_anonymous=payload.is_anonymous,
        expires_at=payload.expires_at,
        thread_id=payload.thread_id,
        player_id=payload.player_id,
    )
    return PollResponse.model_validate(poll)


@router.get("/popular", response_model=list[PollResponse])
async def list_most_popular_polls(
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[PollResponse]:
    return [PollResponse.model_validate(item) for item in polls.list_most_popular_polls(db, limit)]


@router.get("/{poll_id}", response_model=PollResponse)
async def get_poll(poll_id: int, db: SessionDep) -> PollResponse:
    return PollResponse.model_validate(polls.get_poll(db, poll_id))


@router.post("/{poll_id}/vote", response_model=PollVoteResult)
async def vote_on_poll(
    poll_id: int,
    payload: PollVoteRequest,
    db: SessionDep,
    user: OptionalUserDep,
    ip_address: ClientIpDep,
) -> PollVoteResult:
    """Vote for an option.

    Anonymous polls take the caller's address as the voter and accept one
    vote per address. On other polls a signed-in user toggles the option.
    """
    vote = polls.vote_on_poll(db, poll_id, payload.option_id, user=user, ip_address=ip_address)
    poll = polls.get_poll(db, poll_id)
    return PollVoteResult(
        poll_id=poll_id,
        option_id=vote.poll_option_id if vote else None,
        total_votes=poll.total_votes,
        voted_option_ids=polls.get_voted_option_ids(db, poll_id, user=user, ip_address=ip_address),
    )


@router.delete("/{poll_id}/vote", response_model=Removed)
async def remove_poll_vote(
    poll_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    option_id: int | None = None,
) -> Removed:
    removed = polls.remove_poll_vote(db, poll_id, current_user, option_id=option_id)
    return Removed(removed=removed)


@router.get("/{poll_id}/results", response_model=PollResultsResponse)
async def get_poll_results(poll_id: int, db: SessionDep) -> PollResultsResponse:
    return PollResultsResponse.model_validate(polls.get_results(db, poll_id))


@router.post("/{poll_id}/close", response_model=PollResponse)
async def close_poll(poll_id: int, current_user: CurrentUserDep, db: SessionDep) -> PollResponse:
    return PollResponse.model_validate(polls.close_poll(db, poll_id, current_user))


@router.get("/{poll_id}/my-votes", response_model=MyPollVotes)
async def get_my_poll_votes(
    poll_id: int,
    db: SessionDep,
    user: OptionalUserDep,
    ip_address: ClientIpDep,
) -> MyPollVotes:
    """Options the caller holds a vote on."""
    option_ids = polls.get_voted_option_ids(db, poll_id, user=user, ip_address=ip_address)
    return MyPollVotes(option_ids=option_ids)
