# This project was developed with assistance from AI tools.
"""The caller's own search history."""

from fastapi import APIRouter, Depends, Query

from ..core.auth import ALL_ROLES
from ..middleware.auth import CurrentActor, require_roles
from ..schemas import Pagination
from ..schemas.records import SearchLogItem, SearchLogListResponse
from ..services.sql_store import Store

router = APIRouter()


@router.get(
    "/my",
    response_model=SearchLogListResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def my_search_logs(
    actor: CurrentActor,
    store: Store,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> SearchLogListResponse:
    items, total = await store.list_search_logs_for_user(actor.user_id, offset, limit)
    return SearchLogListResponse(
        data=[SearchLogItem.model_validate(e) for e in items],
        pagination=Pagination.of(total, offset, limit),
    )
