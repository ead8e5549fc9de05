# This project was developed with assistance from AI tools.
"""Unlock request endpoints: file, review, and query."""

from db.enums import UnlockRequestStatus
from fastapi import APIRouter, Depends, Query, status

from ..core import arbitration
from ..core.auth import ADMIN_ROLES, ALL_ROLES
from ..middleware.auth import CurrentActor, require_roles
from ..schemas import Pagination
from ..schemas.unlock import (
    UnlockRequestCreate,
    UnlockRequestItem,
    UnlockRequestListResponse,
    UnlockRequestReview,
)
from ..services.effects import Dispatcher
from ..services.sql_store import Store

router = APIRouter()


@router.post(
    "",
    response_model=UnlockRequestItem,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def create_request(
    body: UnlockRequestCreate,
    actor: CurrentActor,
    store: Store,
    dispatch: Dispatcher,
) -> UnlockRequestItem:
    """Ask the current holder (or an admin) to hand over a record's lock."""
    outcome = await arbitration.create_unlock_request(store, actor, body.record_id, body.reason)
    dispatch(outcome.effects)
    return UnlockRequestItem.model_validate(outcome.value)


@router.patch(
    "/{request_id}/review",
    response_model=UnlockRequestItem,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def review_request(
    request_id: int,
    body: UnlockRequestReview,
    actor: CurrentActor,
    store: Store,
    dispatch: Dispatcher,
) -> UnlockRequestItem:
    """Approve (transfers the lock) or deny a pending request."""
    outcome = await arbitration.review_unlock_request(
        store, actor, request_id, body.status, body.denial_reason
    )
    dispatch(outcome.effects)
    return UnlockRequestItem.model_validate(outcome.value)


async def _list(actor, store, scope, status_filter, offset, limit) -> UnlockRequestListResponse:
    items, total = await arbitration.list_unlock_requests(
        store, actor, scope=scope, status=status_filter, offset=offset, limit=limit
    )
    return UnlockRequestListResponse(
        data=[UnlockRequestItem.model_validate(r) for r in items],
        pagination=Pagination.of(total, offset, limit),
    )


@router.get(
    "/my",
    response_model=UnlockRequestListResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def my_requests(
    actor: CurrentActor,
    store: Store,
    status_filter: UnlockRequestStatus | None = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> UnlockRequestListResponse:
    """Requests the caller has filed."""
    return await _list(actor, store, "my", status_filter, offset, limit)


@router.get(
    "/owned",
    response_model=UnlockRequestListResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def owned_requests(
    actor: CurrentActor,
    store: Store,
    status_filter: UnlockRequestStatus | None = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> UnlockRequestListResponse:
    """Requests against records the caller currently holds."""
    return await _list(actor, store, "owned", status_filter, offset, limit)


@router.get(
    "/all",
    response_model=UnlockRequestListResponse,
    dependencies=[Depends(require_roles(*ADMIN_ROLES))],
)
async def all_requests(
    actor: CurrentActor,
    store: Store,
    status_filter: UnlockRequestStatus | None = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> UnlockRequestListResponse:
    return await _list(actor, store, "all", status_filter, offset, limit)


@router.get(
    "/{request_id}",
    response_model=UnlockRequestItem,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def get_request(request_id: int, actor: CurrentActor, store: Store) -> UnlockRequestItem:
    request = await arbitration.get_unlock_request(store, actor, request_id)
    return UnlockRequestItem.model_validate(request)
