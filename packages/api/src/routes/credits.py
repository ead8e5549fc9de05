# This project was developed with assistance from AI tools.
"""Credit ledger endpoints: top-up and balance/transaction reads."""

from fastapi import APIRouter, Depends, Query

from ..core import billing
from ..core.auth import ADMIN_ROLES, ALL_ROLES
from ..middleware.auth import CurrentActor, require_roles
from ..schemas import Pagination
from ..schemas.credit import (
    ClientCreditResponse,
    CreditTransactionItem,
    CreditTransactionListResponse,
    TopUpRequest,
    TopUpResponse,
)
from ..services.effects import Dispatcher
from ..services.sql_store import Store

router = APIRouter()


@router.post(
    "/topup",
    response_model=TopUpResponse,
    dependencies=[Depends(require_roles(*ADMIN_ROLES))],
)
async def top_up(
    body: TopUpRequest,
    actor: CurrentActor,
    store: Store,
    dispatch: Dispatcher,
) -> TopUpResponse:
    outcome = await billing.top_up_credit(store, actor, body.client_id, body.amount)
    dispatch(outcome.effects)
    result = outcome.value
    return TopUpResponse(
        client_id=result.client_id,
        amount=result.amount,
        credit_balance=result.credit_balance,
    )


@router.get(
    "/client/{client_id}",
    response_model=ClientCreditResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def client_credit(client_id: int, actor: CurrentActor, store: Store) -> ClientCreditResponse:
    """Balance and billing mode.  Admins, or members of the client."""
    client = await billing.get_client_credit(store, actor, client_id)
    return ClientCreditResponse.model_validate(client)


@router.get(
    "/client/{client_id}/transactions",
    response_model=CreditTransactionListResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def client_transactions(
    client_id: int,
    actor: CurrentActor,
    store: Store,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> CreditTransactionListResponse:
    items, total = await billing.list_credit_transactions(
        store, actor, client_id, offset=offset, limit=limit
    )
    return CreditTransactionListResponse(
        data=[CreditTransactionItem.model_validate(t) for t in items],
        pagination=Pagination.of(total, offset, limit),
    )
