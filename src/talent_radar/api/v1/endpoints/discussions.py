"""Discussion thread and reply endpoints, including reply votes."""

from typing import Annotated

from fastapi import APIRouter, Query, status
from sqlalchemy.orm import Session

from talent_radar.api.v1.dependencies import CurrentUserDep, LimitQuery, OffsetQuery, SessionDep
from talent_radar.core.settings import settings
from talent_radar.models import ReplyVote
from talent_radar.schemas.common import MyVote, VoteRequest, VoteResult
from talent_radar.schemas.discussions import (
    CategoryResponse,
    ReplyCreate,
    ReplyResponse,
    ReplyUpdate,
    ThreadCreate,
    ThreadFeature,
    ThreadResponse,
    ThreadUpdate,
)
from talent_radar.services import replies, threads

router = APIRouter(prefix="/discussions", tags=["discussions"])


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(db: SessionDep) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(item) for item in threads.list_categories(db)]


@router.get("/threads", response_model=list[ThreadResponse])
async def list_threads(
    db: SessionDep,
    category_id: int | None = None,
    limit: LimitQuery = settings.default_page_size,
    offset: OffsetQuery = 0,
) -> list[ThreadResponse]:
    """List threads by latest activity, pinned threads first."""
    items = threads.list_threads(db, category_id=category_id, limit=limit, offset=offset)
    return [ThreadResponse.model_validate(item) for item in items]


@router.post("/threads", response_model=ThreadResponse, status_code=status.HTTP_201_CREATED)
async def create_thread(
    payload: ThreadCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ThreadResponse:
    thread = threads.create_thread(
        db,
        current_user,
        payload.title,
        payload.content,
        thread_type=payload.thread_type,
        category_id=payload.category_id,
        player_id=payload.player_id,
    )
    return ThreadResponse.model_validate(thread)


@router.get("/threads/search", response_model=list[ThreadResponse])
async def search_threads(
    db: SessionDep,
    q: Annotated[str, Query(description="Text to look for in titles and content")],
    limit: LimitQuery = settings.default_page_size,
    offset: OffsetQuery = 0,
) -> list[ThreadResponse]:
    items = threads.search_threads(db, q, limit=limit, offset=offset)
    return [ThreadResponse.model_validate(item) for item in items]


@router.get("/threads/pinned", response_model=list[ThreadResponse])
async def list_pinned_threads(db: SessionDep) -> list[ThreadResponse]:
    return [ThreadResponse.model_validate(item) for item in threads.list_pinned_threads(db)]


@router.get("/threads/trending", response_model=list[ThreadResponse])
async def list_trending_threads(
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[ThreadResponse]:
    items = threads.list_trending_threads(db, limit=limit)
    return [ThreadResponse.model_validate(item) for item in items]


@router.get("/threads/{thread_id}", response_model=ThreadResponse)
async def get_thread(thread_id: int, db: SessionDep) -> ThreadResponse:
    return ThreadResponse.model_validate(threads.get_thread(db, thread_id))


@router.put("/threads/{thread_id}", response_model=ThreadResponse)
async def update_thread(
    thread_id: int,
    payload: ThreadUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ThreadResponse:
    thread = threads.update_thread(
        db, thread_id, current_user, title=payload.title, content=payload.content
    )
    return ThreadResponse.model_validate(thread)


@router.post("/threads/{thread_id}/view", response_model=ThreadResponse)
async def record_thread_view(thread_id: int, db: SessionDep) -> ThreadResponse:
    return ThreadResponse.model_validate(threads.record_thread_view(db, thread_id))


@router.post("/threads/{thread_id}/pin", response_model=ThreadResponse)
async def pin_thread(thread_id: int, current_user: CurrentUserDep, db: SessionDep) -> ThreadResponse:
    return ThreadResponse.model_validate(threads.set_pinned(db, thread_id, current_user, True))


@router.post("/threads/{thread_id}/unpin", response_model=ThreadResponse)
async def unpin_thread(
    thread_id: int, current_user: CurrentUserDep, db: SessionDep
) -> ThreadResponse:
    return ThreadResponse.model_validate(threads.set_pinned(db, thread_id, current_user, False))


@router.post("/threads/{thread_id}/lock", response_model=ThreadResponse)
async def lock_thread(thread_id: int, current_user: CurrentUserDep, db: SessionDep) -> ThreadResponse:
    return ThreadResponse.model_validate(threads.set_locked(db, thread_id, current_user, True))


@router.post("/threads/{thread_id}/unlock", response_model=ThreadResponse)
async def unlock_thread(
    thread_id: int, current_user: CurrentUserDep, db: SessionDep
) -> ThreadResponse:
    return ThreadResponse.model_validate(threads.set_locked(db, thread_id, current_user, False))


@router.post("/threads/{thread_id}/feature", response_model=ThreadResponse)
async def feature_thread(
    thread_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    payload: ThreadFeature | None = None,
) -> ThreadResponse:
    featured = payload.featured if payload else True
    thread = threads.set_featured(db, thread_id, current_user, featured)
    return ThreadResponse.model_validate(thread)


@router.get("/threads/{thread_id}/replies", response_model=list[ReplyResponse])
async def list_thread_replies(
    thread_id: int,
    db: SessionDep,
    limit: LimitQuery = 50,
    offset: OffsetQuery = 0,
) -> list[ReplyResponse]:
    items = replies.list_thread_replies(db, thread_id, limit=limit, offset=offset)
    return [ReplyResponse.model_validate(item) for item in items]


@router.post(
    "/threads/{thread_id}/replies",
    response_model=ReplyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reply(
    thread_id: int,
    payload: ReplyCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReplyResponse:
    reply = replies.create_reply(
        db, thread_id, current_user, payload.content, parent_reply_id=payload.parent_reply_id
    )
    return ReplyResponse.model_validate(reply)


@router.put("/replies/{reply_id}", response_model=ReplyResponse)
async def update_reply(
    reply_id: int,
    payload: ReplyUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReplyResponse:
    reply = replies.update_reply(db, reply_id, current_user, payload.content)
    return ReplyResponse.model_validate(reply)


@router.delete("/replies/{reply_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reply(reply_id: int, current_user: CurrentUserDep, db: SessionDep) -> None:
    replies.delete_reply(db, reply_id, current_user)


@router.get("/replies/{reply_id}/replies", response_model=list[ReplyResponse])
async def list_child_replies(reply_id: int, db: SessionDep) -> list[ReplyResponse]:
    return [ReplyResponse.model_validate(item) for item in replies.list_child_replies(db, reply_id)]


def _vote_result(db: Session, reply_id: int, vote: ReplyVote | None) -> VoteResult:
    reply = replies.get_reply(db, reply_id)
    return VoteResult(
        subject_id=reply_id,
        vote_type=vote.vote_type if vote else None,
        upvotes=reply.upvotes,
        downvotes=reply.downvotes,
    )


@router.post("/replies/{reply_id}/vote", response_model=VoteResult)
async def vote_on_reply(
    reply_id: int,
    payload: VoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResult:
    """Apply a reaction: repeating the current one withdraws it."""
    vote = replies.vote_on_reply(db, reply_id, current_user, payload.vote_type)
    return _vote_result(db, reply_id, vote)


@router.delete("/replies/{reply_id}/vote", response_model=VoteResult)
async def remove_reply_vote(
    reply_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResult:
    replies.remove_reply_vote(db, reply_id, current_user)
    return _vote_result(db, reply_id, None)


@router.get("/replies/{reply_id}/vote", response_model=MyVote)
async def get_my_reply_vote(
    reply_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVote:
    return MyVote(vote_type=replies.get_reply_vote(db, reply_id, current_user))
