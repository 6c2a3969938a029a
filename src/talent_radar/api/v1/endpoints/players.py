"""Player profile and view-tracking endpoints."""

from typing import Annotated

from fastapi import APIRouter, Header, Query, status

from talent_radar.api.v1.dependencies import ClientIpDep, OptionalUserDep, SessionDep
from talent_radar.schemas.players import PlayerResponse, ViewCreate, ViewStatisticsResponse
from talent_radar.services import views

router = APIRouter(prefix="/players", tags=["players"])


@router.get("/trending", response_model=list[PlayerResponse])
async def list_trending_players(
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[PlayerResponse]:
    """List players ordered by trending score."""
    players = views.get_trending_players(db, limit)
    return [PlayerResponse.model_validate(player) for player in players]


@router.get("/{player_id}", response_model=PlayerResponse)
async def get_player(player_id: int, db: SessionDep) -> PlayerResponse:
    return PlayerResponse.model_validate(views.get_player(db, player_id))


@router.post(
    "/{player_id}/views",
    response_model=PlayerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_player_view(
    player_id: int,
    db: SessionDep,
    user: OptionalUserDep,
    ip_address: ClientIpDep,
    view: ViewCreate | None = None,
    user_agent: Annotated[str | None, Header()] = None,
) -> PlayerResponse:
    """Record a profile view and return the refreshed counters."""
    player = views.record_view(
        db,
        player_id,
        user=user,
        ip_address=ip_address,
        user_agent=user_agent,
        referrer=view.referrer if view else None,
    )
    return PlayerResponse.model_validate(player)


@router.get("/{player_id}/views", response_model=ViewStatisticsResponse)
async def get_view_statistics(player_id: int, db: SessionDep) -> ViewStatisticsResponse:
    return ViewStatisticsResponse.model_validate(views.get_view_statistics(db, player_id))
