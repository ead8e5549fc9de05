# This project was developed with assistance from AI tools.
"""Negative record endpoints: claim-or-view search, lock info, print."""

import logging
from typing import Literal

from db.enums import RecordType
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from ..core import arbitration, billing
from ..core import records as record_ops
from ..core.auth import ADMIN_ROLES, ALL_ROLES
from ..core.config import settings
from ..core.ports import RecordCriteria
from ..middleware.auth import CurrentActor, require_roles
from ..schemas.records import (
    AccessHistoryItem,
    LockHistoryItem,
    LockHistoryResponse,
    LockInfoResponse,
    LockOwner,
    PrintMeta,
    PrintResponse,
    RecordCreate,
    RecordItem,
    SearchResponse,
    SearchResultItem,
)
from ..services.effects import Dispatcher
from ..services.printing import render_record_pdf
from ..services.sql_store import Store

logger = logging.getLogger(__name__)

router = APIRouter()


def _result_item(view: arbitration.RecordView) -> SearchResultItem:
    base = RecordItem.model_validate(view.record).model_dump()
    return SearchResultItem(
        **base,
        is_locked=view.is_locked,
        is_owner=view.is_owner,
        has_pending_request=view.has_pending_request,
        locked_by_name=view.locked_by_name,
        locked_by_affiliate=view.locked_by_affiliate,
        locked_at=view.locked_at,
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def search_records(
    actor: CurrentActor,
    store: Store,
    dispatch: Dispatcher,
    type: RecordType = Query(..., description="Individual or Company"),
    term: str | None = Query(default=None, max_length=200),
    first_name: str | None = Query(default=None, max_length=120),
    middle_name: str | None = Query(default=None, max_length=120),
    last_name: str | None = Query(default=None, max_length=120),
) -> SearchResponse:
    """Search records; unlocked hits are locked to the caller."""
    criteria = RecordCriteria(
        type=type,
        first_name=first_name,
        middle_name=middle_name,
        last_name=last_name,
        term=term,
    )
    outcome = await arbitration.claim_or_view(
        store, actor, criteria, result_limit=settings.SEARCH_RESULT_LIMIT
    )
    dispatch(outcome.effects)
    result = outcome.value
    return SearchResponse(
        results=[_result_item(v) for v in result.results],
        count=len(result.results),
        billed=result.billed,
        remaining_credit=result.remaining_credit,
    )


@router.post(
    "",
    response_model=RecordItem,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*ADMIN_ROLES))],
)
async def create_record(
    body: RecordCreate,
    actor: CurrentActor,
    store: Store,
    dispatch: Dispatcher,
) -> RecordItem:
    """Create a negative record (admins only)."""
    outcome = await record_ops.create_record(store, actor, body.model_dump())
    dispatch(outcome.effects)
    return RecordItem.model_validate(outcome.value)


@router.get(
    "/{record_id}/lock-info",
    response_model=LockInfoResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def lock_info(record_id: int, actor: CurrentActor, store: Store) -> LockInfoResponse:
    """Current lock holder's contact profile and the record's access history."""
    info = await arbitration.get_lock_info(
        store, actor, record_id, history_limit=settings.ACCESS_HISTORY_LIMIT
    )
    return LockInfoResponse(
        record_id=info.record_id,
        locked_at=info.locked_at,
        owner=LockOwner.model_validate(info.owner),
        access_history=[AccessHistoryItem.model_validate(h) for h in info.access_history],
    )


@router.get(
    "/{record_id}/lock-history",
    response_model=LockHistoryResponse,
    dependencies=[Depends(require_roles(*ADMIN_ROLES))],
)
async def lock_history(record_id: int, actor: CurrentActor, store: Store) -> LockHistoryResponse:
    entries = await record_ops.get_lock_history(store, actor, record_id)
    return LockHistoryResponse(
        record_id=record_id,
        data=[LockHistoryItem.model_validate(e) for e in entries],
    )


@router.post(
    "/{record_id}/print",
    response_model=PrintResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def print_record(
    record_id: int,
    actor: CurrentActor,
    store: Store,
    dispatch: Dispatcher,
    format: Literal["json", "pdf"] = Query(default="json"),
):
    """Print a record the caller holds.  Prepaid clients are billed first."""
    outcome = await billing.print_record(store, actor, record_id, fee=settings.PRINT_FEE)
    dispatch(outcome.effects)
    result = outcome.value

    if format == "pdf":
        return Response(
            content=render_record_pdf(result),
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="record-{record_id}.pdf"'},
        )
    return PrintResponse(
        record=RecordItem.model_validate(result.record),
        print_meta=PrintMeta(**result.print_meta),
        billed=result.billed,
        fee=result.fee,
        remaining_credit=result.remaining_credit,
    )
