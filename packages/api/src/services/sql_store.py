# This project was developed with assistance from AI tools.
"""SQLAlchemy implementation of the ``RecordStore`` port.

Each guarded operation is a single PostgreSQL statement:

* lock creation -- ``INSERT .. ON CONFLICT DO NOTHING`` on ``uq_record_locks_record_id``
* pending request -- ``INSERT .. ON CONFLICT DO NOTHING`` on the partial
  unique index ``uq_unlock_requests_pending``
* review -- ``UPDATE .. WHERE status = 'PENDING' RETURNING``
* prepaid deduction -- ``UPDATE .. WHERE credit_balance >= :fee RETURNING``

``get_record(for_update=True)`` takes ``SELECT .. FOR UPDATE`` on the record
row, serializing reviews and prints of the same record until commit.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Annotated

from db import (
    Client,
    CreditTransaction,
    LockHistory,
    NegativeRecord,
    RecordLock,
    SearchLog,
    UnlockRequest,
    User,
    get_db,
)
from db.enums import (
    CreditTransactionType,
    LockAction,
    RecordType,
    UnlockRequestStatus,
    UserRole,
)
from fastapi import Depends
from sqlalchemy import and_, func, insert, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.ports import (
    ClientAccount,
    CreditTransactionData,
    LockHistoryEntry,
    LockState,
    NegativeRecordData,
    RecordCriteria,
    SearchLogEntry,
    UnlockRequestData,
    UserProfile,
)

logger = logging.getLogger(__name__)

_RECORD_FIELDS = tuple(NegativeRecordData.__dataclass_fields__)


def _like(value: str) -> str:
    """Substring ILIKE pattern with LIKE metacharacters escaped."""
    escaped = value.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _record(row: NegativeRecord) -> NegativeRecordData:
    return NegativeRecordData(**{name: getattr(row, name) for name in _RECORD_FIELDS})


def _client(row: Client) -> ClientAccount:
    return ClientAccount(
        id=row.id,
        name=row.name,
        billing_type=row.billing_type,
        credit_balance=row.credit_balance,
        credit_limit=row.credit_limit,
        is_active=row.is_active,
    )


def _lock(row: RecordLock) -> LockState:
    return LockState(record_id=row.record_id, locked_by=row.locked_by, locked_at=row.locked_at)


def _history(row: LockHistory) -> LockHistoryEntry:
    return LockHistoryEntry(
        id=row.id,
        record_id=row.record_id,
        locked_by=row.locked_by,
        action=row.action,
        created_at=row.created_at,
    )


def _request(row: UnlockRequest) -> UnlockRequestData:
    return UnlockRequestData(
        id=row.id,
        requested_by=row.requested_by,
        record_id=row.record_id,
        status=row.status,
        reason=row.reason,
        reviewed_by=row.reviewed_by,
        reviewed_at=row.reviewed_at,
        denial_reason=row.denial_reason,
        created_at=row.created_at,
    )


def _search_log(row: SearchLog, user_name: str | None = None, client_name: str | None = None):
    return SearchLogEntry(
        id=row.id,
        user_id=row.user_id,
        client_id=row.client_id,
        search_type=row.search_type,
        search_term=row.search_term,
        is_billed=row.is_billed,
        fee=row.fee,
        created_at=row.created_at,
        user_name=user_name,
        client_name=client_name,
    )


def _transaction(row: CreditTransaction) -> CreditTransactionData:
    return CreditTransactionData(
        id=row.id,
        client_id=row.client_id,
        amount=row.amount,
        type=row.type,
        description=row.description,
        performed_by=row.performed_by,
        created_at=row.created_at,
    )


def _display_name(user: User) -> str:
    parts = [user.first_name, user.middle_name, user.last_name]
    return " ".join(p for p in parts if p) or user.email


class SqlRecordStore:
    """RecordStore over one request-scoped ``AsyncSession``."""

    def __init__(self, session: AsyncSession):
        self._session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Commit on success, roll back on any exception."""
        try:
            yield
        except BaseException:
            await self._session.rollback()
            raise
        await self._session.commit()

    async def _one(self, stmt):
        result = await self._session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def _all(self, stmt) -> list:
        result = await self._session.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def _count(self, stmt) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        )
        return result.scalar_one()

    # -- clients / users -----------------------------------------------------

    async def get_client(self, client_id: int) -> ClientAccount | None:
        row = await self._one(select(Client).where(Client.id == client_id))
        return _client(row) if row is not None else None

    async def get_user(self, user_id: int) -> UserProfile | None:
        stmt = (
            select(User, Client.name)
            .outerjoin(Client, Client.id == User.client_id)
            .where(User.id == user_id)
        )
        result = await self._session.execute(stmt)
        found = result.first()
        if found is None:
            return None
        user, client_name = found
        return UserProfile(
            id=user.id,
            email=user.email,
            role=user.role,
            client_id=user.client_id,
            client_name=client_name,
            first_name=user.first_name,
            middle_name=user.middle_name,
            last_name=user.last_name,
            mobile_number=user.mobile_number,
            telephone=user.telephone,
            is_approved=user.is_approved,
        )

    async def list_admin_user_ids(self) -> list[int]:
        stmt = (
            select(User.id)
            .where(User.role.in_([UserRole.ADMIN, UserRole.SUPER_ADMIN]))
            .where(User.is_approved.is_(True))
            .order_by(User.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # -- records ---------------------------------------------------------------

    async def find_records(self, criteria: RecordCriteria, limit: int) -> list[NegativeRecordData]:
        stmt = select(NegativeRecord).where(NegativeRecord.type == criteria.type)
        if criteria.type == RecordType.COMPANY:
            pattern = _like(criteria.term or "")
            stmt = stmt.where(NegativeRecord.company_name.ilike(pattern, escape="\\"))
        elif criteria.has_name():
            columns = (
                NegativeRecord.first_name,
                NegativeRecord.middle_name,
                NegativeRecord.last_name,
            )
            clauses = [
                column.ilike(_like(value), escape="\\")
                for column, value in zip(columns, criteria.names(), strict=True)
                if value and value.strip()
            ]
            stmt = stmt.where(and_(*clauses))
        else:
            pattern = _like(criteria.term or "")
            stmt = stmt.where(
                or_(
                    NegativeRecord.first_name.ilike(pattern, escape="\\"),
                    NegativeRecord.middle_name.ilike(pattern, escape="\\"),
                    NegativeRecord.last_name.ilike(pattern, escape="\\"),
                )
            )
        rows = await self._all(stmt.order_by(NegativeRecord.id).limit(limit))
        return [_record(r) for r in rows]

    async def get_record(
        self, record_id: int, *, for_update: bool = False
    ) -> NegativeRecordData | None:
        stmt = select(NegativeRecord).where(NegativeRecord.id == record_id)
        if for_update:
            stmt = stmt.with_for_update()
        row = await self._one(stmt)
        return _record(row) if row is not None else None

    async def create_record(self, fields: dict) -> NegativeRecordData:
        stmt = insert(NegativeRecord).values(**fields).returning(NegativeRecord)
        row = await self._one(stmt)
        return _record(row)

    # -- locks -----------------------------------------------------------------

    async def get_lock(self, record_id: int) -> LockState | None:
        row = await self._one(select(RecordLock).where(RecordLock.record_id == record_id))
        return _lock(row) if row is not None else None

    async def get_locks(self, record_ids: list[int]) -> dict[int, LockState]:
        if not record_ids:
            return {}
        rows = await self._all(select(RecordLock).where(RecordLock.record_id.in_(record_ids)))
        return {r.record_id: _lock(r) for r in rows}

    async def insert_lock_if_absent(self, record_id: int, user_id: int) -> LockState | None:
        stmt = (
            pg_insert(RecordLock)
            .values(record_id=record_id, locked_by=user_id)
            .on_conflict_do_nothing(constraint="uq_record_locks_record_id")
            .returning(RecordLock)
        )
        row = await self._one(stmt)
        return _lock(row) if row is not None else None

    async def transfer_lock(self, record_id: int, user_id: int) -> LockState | None:
        stmt = (
            update(RecordLock)
            .where(RecordLock.record_id == record_id)
            .values(locked_by=user_id, locked_at=func.now())
            .returning(RecordLock)
        )
        row = await self._one(stmt)
        return _lock(row) if row is not None else None

    async def append_lock_history(
        self, record_id: int, user_id: int, action: LockAction
    ) -> LockHistoryEntry:
        stmt = (
            insert(LockHistory)
            .values(record_id=record_id, locked_by=user_id, action=action)
            .returning(LockHistory)
        )
        return _history(await self._one(stmt))

    async def list_lock_history(self, record_id: int) -> list[LockHistoryEntry]:
        stmt = (
            select(LockHistory)
            .where(LockHistory.record_id == record_id)
            .order_by(LockHistory.created_at.asc(), LockHistory.id.asc())
        )
        return [_history(r) for r in await self._all(stmt)]

    # -- search logs -------------------------------------------------------------

    async def add_search_log(
        self,
        user_id: int,
        client_id: int,
        search_type: RecordType,
        search_term: str,
        is_billed: bool,
        fee: Decimal,
    ) -> SearchLogEntry:
        stmt = (
            insert(SearchLog)
            .values(
                user_id=user_id,
                client_id=client_id,
                search_type=search_type,
                search_term=search_term,
                is_billed=is_billed,
                fee=fee,
            )
            .returning(SearchLog)
        )
        return _search_log(await self._one(stmt))

    async def list_search_logs_by_term(self, search_term: str, limit: int) -> list[SearchLogEntry]:
        stmt = (
            select(SearchLog, User, Client.name)
            .join(User, User.id == SearchLog.user_id)
            .join(Client, Client.id == SearchLog.client_id)
            .where(SearchLog.search_term == search_term)
            .order_by(SearchLog.created_at.desc(), SearchLog.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [
            _search_log(log, _display_name(user), client_name)
            for log, user, client_name in result.all()
        ]

    async def list_search_logs_for_user(
        self, user_id: int, offset: int, limit: int
    ) -> tuple[list[SearchLogEntry], int]:
        stmt = select(SearchLog).where(SearchLog.user_id == user_id)
        total = await self._count(stmt)
        rows = await self._all(
            stmt.order_by(SearchLog.created_at.desc(), SearchLog.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [_search_log(r) for r in rows], total

    # -- unlock requests ---------------------------------------------------------

    async def pending_request_record_ids(self, user_id: int, record_ids: list[int]) -> set[int]:
        if not record_ids:
            return set()
        stmt = select(UnlockRequest.record_id).where(
            UnlockRequest.requested_by == user_id,
            UnlockRequest.record_id.in_(record_ids),
            UnlockRequest.status == UnlockRequestStatus.PENDING,
        )
        result = await self._session.execute(stmt)
        return set(result.scalars().all())

    async def find_pending_request(self, user_id: int, record_id: int) -> UnlockRequestData | None:
        stmt = select(UnlockRequest).where(
            UnlockRequest.requested_by == user_id,
            UnlockRequest.record_id == record_id,
            UnlockRequest.status == UnlockRequestStatus.PENDING,
        )
        row = await self._one(stmt)
        return _request(row) if row is not None else None

    async def insert_pending_request(
        self, user_id: int, record_id: int, reason: str | None
    ) -> UnlockRequestData | None:
        stmt = (
            pg_insert(UnlockRequest)
            .values(
                requested_by=user_id,
                record_id=record_id,
                reason=reason,
                status=UnlockRequestStatus.PENDING,
            )
            .on_conflict_do_nothing(
                index_elements=[UnlockRequest.requested_by, UnlockRequest.record_id],
                index_where=UnlockRequest.status == UnlockRequestStatus.PENDING,
            )
            .returning(UnlockRequest)
        )
        row = await self._one(stmt)
        return _request(row) if row is not None else None

    async def get_request(self, request_id: int) -> UnlockRequestData | None:
        row = await self._one(select(UnlockRequest).where(UnlockRequest.id == request_id))
        return _request(row) if row is not None else None

    async def resolve_pending_request(
        self,
        request_id: int,
        status: UnlockRequestStatus,
        reviewer_id: int,
        denial_reason: str | None = None,
    ) -> UnlockRequestData | None:
        stmt = (
            update(UnlockRequest)
            .where(
                UnlockRequest.id == request_id,
                UnlockRequest.status == UnlockRequestStatus.PENDING,
            )
            .values(
                status=status,
                reviewed_by=reviewer_id,
                reviewed_at=func.now(),
                denial_reason=denial_reason,
            )
            .returning(UnlockRequest)
        )
        row = await self._one(stmt)
        return _request(row) if row is not None else None

    async def deny_other_pending(
        self, record_id: int, exclude_request_id: int, reviewer_id: int
    ) -> list[UnlockRequestData]:
        stmt = (
            update(UnlockRequest)
            .where(
                UnlockRequest.record_id == record_id,
                UnlockRequest.id != exclude_request_id,
                UnlockRequest.status == UnlockRequestStatus.PENDING,
            )
            .values(
                status=UnlockRequestStatus.DENIED,
                reviewed_by=reviewer_id,
                reviewed_at=func.now(),
            )
            .returning(UnlockRequest)
        )
        return [_request(r) for r in await self._all(stmt)]

    async def list_requests(
        self,
        *,
        requested_by: int | None = None,
        held_by: int | None = None,
        status: UnlockRequestStatus | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[UnlockRequestData], int]:
        stmt = select(UnlockRequest)
        if requested_by is not None:
            stmt = stmt.where(UnlockRequest.requested_by == requested_by)
        if held_by is not None:
            stmt = stmt.join(RecordLock, RecordLock.record_id == UnlockRequest.record_id).where(
                RecordLock.locked_by == held_by
            )
        if status is not None:
            stmt = stmt.where(UnlockRequest.status == status)
        total = await self._count(stmt)
        rows = await self._all(
            stmt.order_by(UnlockRequest.created_at.desc(), UnlockRequest.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [_request(r) for r in rows], total

    # -- credit ledger -----------------------------------------------------------

    async def deduct_credit(self, client_id: int, amount: Decimal) -> Decimal | None:
        stmt = (
            update(Client)
            .where(Client.id == client_id, Client.credit_balance >= amount)
            .values(credit_balance=Client.credit_balance - amount)
            .returning(Client.credit_balance)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_credit(self, client_id: int, amount: Decimal) -> Decimal | None:
        stmt = (
            update(Client)
            .where(Client.id == client_id)
            .values(credit_balance=Client.credit_balance + amount)
            .returning(Client.credit_balance)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_credit_transaction(
        self,
        client_id: int,
        amount: Decimal,
        type: CreditTransactionType,
        description: str | None,
        performed_by: int,
    ) -> CreditTransactionData:
        stmt = (
            insert(CreditTransaction)
            .values(
                client_id=client_id,
                amount=amount,
                type=type,
                description=description,
                performed_by=performed_by,
            )
            .returning(CreditTransaction)
        )
        return _transaction(await self._one(stmt))

    async def list_credit_transactions(
        self, client_id: int, offset: int, limit: int
    ) -> tuple[list[CreditTransactionData], int]:
        stmt = select(CreditTransaction).where(CreditTransaction.client_id == client_id)
        total = await self._count(stmt)
        rows = await self._all(
            stmt.order_by(CreditTransaction.created_at.desc(), CreditTransaction.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [_transaction(r) for r in rows], total


async def get_record_store(session: Annotated[AsyncSession, Depends(get_db)]) -> SqlRecordStore:
    """FastAPI dependency: a store bound to the request's session."""
    return SqlRecordStore(session)


Store = Annotated[SqlRecordStore, Depends(get_record_store)]
