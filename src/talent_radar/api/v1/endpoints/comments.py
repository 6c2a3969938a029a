"""Player comment endpoints, including comment votes."""

from fastapi import APIRouter, status
from sqlalchemy.orm import Session

from talent_radar.api.v1.dependencies import CurrentUserDep, LimitQuery, OffsetQuery, SessionDep
from talent_radar.core.settings import settings
from talent_radar.models import PlayerCommentVote
from talent_radar.schemas.comments import (
    CommentCreate,
    CommentFeature,
    CommentResponse,
    CommentUpdate,
)
from talent_radar.schemas.common import MyVote, VoteRequest, VoteResult
from talent_radar.services import comments

router = APIRouter(tags=["comments"])


@router.get("/players/{player_id}/comments", response_model=list[CommentResponse])
async def list_player_comments(
    player_id: int,
    db: SessionDep,
    limit: LimitQuery = settings.default_page_size,
    offset: OffsetQuery = 0,
) -> list[CommentResponse]:
    """List top-level comments on a player, newest first."""
    items = comments.list_player_comments(db, player_id, limit=limit, offset=offset)
    return [CommentResponse.model_validate(item) for item in items]


@router.post(
    "/players/{player_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    player_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentResponse:
    comment = comments.create_comment(
        db,
        player_id,
        current_user,
        payload.content,
        parent_comment_id=payload.parent_comment_id,
    )
    return CommentResponse.model_validate(comment)


@router.get("/players/{player_id}/comments/featured", response_model=list[CommentResponse])
async def list_featured_comments(player_id: int, db: SessionDep) -> list[CommentResponse]:
    items = comments.list_featured_comments(db, player_id)
    return [CommentResponse.model_validate(item) for item in items]


@router.put("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentResponse:
    comment = comments.update_comment(db, comment_id, current_user, payload.content)
    return CommentResponse.model_validate(comment)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: int, current_user: CurrentUserDep, db: SessionDep) -> None:
    comments.delete_comment(db, comment_id, current_user)


@router.get("/comments/{comment_id}/replies", response_model=list[CommentResponse])
async def list_comment_replies(comment_id: int, db: SessionDep) -> list[CommentResponse]:
    items = comments.list_comment_replies(db, comment_id)
    return [CommentResponse.model_validate(item) for item in items]


@router.post("/comments/{comment_id}/feature", response_model=CommentResponse)
async def feature_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    payload: CommentFeature | None = None,
) -> CommentResponse:
    featured = payload.featured if payload else True
    comment = comments.feature_comment(db, comment_id, current_user, featured=featured)
    return CommentResponse.model_validate(comment)


def _vote_result(db: Session, comment_id: int, vote: PlayerCommentVote | None) -> VoteResult:
    comment = comments.get_comment(db, comment_id)
    return VoteResult(
        subject_id=comment_id,
        vote_type=vote.vote_type if vote else None,
        upvotes=comment.upvotes,
        downvotes=comment.downvotes,
    )


@router.post("/comments/{comment_id}/vote", response_model=VoteResult)
async def vote_on_comment(
    comment_id: int,
    payload: VoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResult:
    """Apply a reaction: repeating the current one withdraws it."""
    vote = comments.vote_on_comment(db, comment_id, current_user, payload.vote_type)
    return _vote_result(db, comment_id, vote)


@router.delete("/comments/{comment_id}/vote", response_model=VoteResult)
async def remove_comment_vote(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResult:
    comments.remove_comment_vote(db, comment_id, current_user)
    return _vote_result(db, comment_id, None)


@router.get("/comments/{comment_id}/vote", response_model=MyVote)
async def get_my_comment_vote(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVote:
    """Get the current user's vote on a comment."""
    return MyVote(vote_type=comments.get_comment_vote(db, comment_id, current_user))
