# This project was developed with assistance from AI tools.
"""Concurrency guarantees of the SQL store against real PostgreSQL.

Every competitor runs in its own session and transaction, so these exercise
the unique lock row, the partial unique pending index and the conditional
UPDATEs rather than any in-process locking.
"""

import asyncio
from decimal import Decimal

import pytest
from db import Client, LockHistory, RecordLock, UnlockRequest
from db.enums import LockAction, RecordType, UnlockRequestStatus, UserRole
from sqlalchemy import func, select

from src.core.arbitration import claim_or_view, create_unlock_request, review_unlock_request
from src.core.billing import print_record, top_up_credit
from src.core.errors import Conflict, InvalidState, PaymentRequired
from src.core.ports import Actor, RecordCriteria
from src.services.sql_store import SqlRecordStore

pytestmark = pytest.mark.integration

_JUAN = RecordCriteria(
    type=RecordType.INDIVIDUAL, first_name="Juan", middle_name="Perez", last_name="Dela Cruz"
)


def _affiliate(user_id, client_id) -> Actor:
    return Actor(user_id=user_id, role=UserRole.AFFILIATE, client_id=client_id)


async def _run(session_factory, op, *args, **kwargs):
    async with session_factory() as session:
        return await op(SqlRecordStore(session), *args, **kwargs)


async def _scalar(session_factory, stmt):
    async with session_factory() as session:
        return (await session.execute(stmt)).scalar_one()


async def test_concurrent_first_searches_create_one_lock(session_factory, registry):
    competitors = [
        _affiliate(registry.maria, registry.alpha),
        _affiliate(registry.jose, registry.beta),
        _affiliate(registry.ana, registry.gamma),
    ]

    outcomes = await asyncio.gather(
        *[_run(session_factory, claim_or_view, actor, _JUAN) for actor in competitors]
    )

    owners = [o.value.results[0].is_owner for o in outcomes]
    assert owners.count(True) == 1
    assert await _scalar(
        session_factory,
        select(func.count()).select_from(RecordLock).where(RecordLock.record_id == registry.juan),
    ) == 1
    assert await _scalar(
        session_factory,
        select(func.count())
        .select_from(LockHistory)
        .where(
            LockHistory.record_id == registry.juan,
            LockHistory.action == LockAction.LOCK_CREATED,
        ),
    ) == 1


async def test_concurrent_duplicate_requests_create_one_pending(session_factory, registry):
    await _run(session_factory, claim_or_view, _affiliate(registry.maria, registry.alpha), _JUAN)
    jose = _affiliate(registry.jose, registry.beta)

    results = await asyncio.gather(
        *[
            _run(session_factory, create_unlock_request, jose, registry.juan, "verification")
            for _ in range(4)
        ],
        return_exceptions=True,
    )

    assert sum(1 for r in results if not isinstance(r, Exception)) == 1
    assert all(isinstance(r, Conflict) for r in results if isinstance(r, Exception))
    assert await _scalar(
        session_factory,
        select(func.count())
        .select_from(UnlockRequest)
        .where(UnlockRequest.status == UnlockRequestStatus.PENDING),
    ) == 1


async def test_concurrent_reviews_resolve_once(session_factory, registry):
    await _run(session_factory, claim_or_view, _affiliate(registry.maria, registry.alpha), _JUAN)
    created = await _run(
        session_factory,
        create_unlock_request,
        _affiliate(registry.jose, registry.beta),
        registry.juan,
        "verification",
    )
    reviewers = [
        Actor(user_id=registry.admin, role=UserRole.ADMIN),
        Actor(user_id=registry.super_admin, role=UserRole.SUPER_ADMIN),
    ]

    results = await asyncio.gather(
        *[
            _run(session_factory, review_unlock_request, reviewer, created.value.id, "approved")
            for reviewer in reviewers
        ],
        return_exceptions=True,
    )

    assert sum(1 for r in results if not isinstance(r, Exception)) == 1
    assert any(isinstance(r, InvalidState) for r in results)
    history = await _scalar(
        session_factory,
        select(func.count())
        .select_from(LockHistory)
        .where(
            LockHistory.record_id == registry.juan,
            LockHistory.action == LockAction.LOCK_TRANSFERRED,
        ),
    )
    assert history == 1
    holder = await _scalar(
        session_factory, select(RecordLock.locked_by).where(RecordLock.record_id == registry.juan)
    )
    assert holder == registry.jose


async def test_concurrent_prints_never_overspend(session_factory, registry):
    ana = _affiliate(registry.ana, registry.gamma)
    pedro = RecordCriteria(type=RecordType.INDIVIDUAL, first_name="Pedro", last_name="Garcia")
    await _run(session_factory, claim_or_view, ana, pedro)

    results = await asyncio.gather(
        *[
            _run(session_factory, print_record, ana, registry.pedro, fee=Decimal("1.00"))
            for _ in range(5)
        ],
        return_exceptions=True,
    )

    assert sum(1 for r in results if not isinstance(r, Exception)) == 1
    assert all(isinstance(r, PaymentRequired) for r in results if isinstance(r, Exception))
    balance = await _scalar(
        session_factory, select(Client.credit_balance).where(Client.id == registry.gamma)
    )
    assert balance == Decimal("0.00")


async def test_top_up_and_print_both_land(session_factory, registry):
    maria = _affiliate(registry.maria, registry.alpha)
    admin = Actor(user_id=registry.admin, role=UserRole.ADMIN)
    await _run(session_factory, claim_or_view, maria, _JUAN)

    await asyncio.gather(
        _run(session_factory, top_up_credit, admin, registry.alpha, Decimal("10.00")),
        _run(session_factory, print_record, maria, registry.juan, fee=Decimal("1.00")),
    )

    balance = await _scalar(
        session_factory, select(Client.credit_balance).where(Client.id == registry.alpha)
    )
    assert balance == Decimal("34.00")
