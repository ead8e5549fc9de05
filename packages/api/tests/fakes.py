# This project was developed with assistance from AI tools.
"""In-memory ``RecordStore`` for core and functional tests.

``InMemoryDatabase`` holds shared state; each ``InMemoryRecordStore`` is one
session over it.  Guarded operations never await between their check and
their write, so they are atomic under asyncio just like the single SQL
statements they stand in for.  ``get_record(for_update=True)`` takes a
per-record asyncio.Lock held until the surrounding ``atomic()`` exits, and
every method yields once so ``asyncio.gather`` interleaves concurrent
callers.  A failed ``atomic()`` replays an undo log.
"""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from db.enums import (
    BillingType,
    CreditTransactionType,
    LockAction,
    RecordType,
    UnlockRequestStatus,
    UserRole,
)

from src.core.ports import (
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

_EPOCH = datetime(2026, 1, 1, tzinfo=UTC)


class InMemoryDatabase:
    def __init__(self):
        self.clients: dict[int, ClientAccount] = {}
        self.users: dict[int, UserProfile] = {}
        self.records: dict[int, NegativeRecordData] = {}
        self.locks: dict[int, LockState] = {}
        self.lock_history: list[LockHistoryEntry] = []
        self.requests: dict[int, UnlockRequestData] = {}
        self.search_logs: list[SearchLogEntry] = []
        self.transactions: list[CreditTransactionData] = []
        self.row_guards: dict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._ids: dict[str, int] = defaultdict(int)
        self._ticks = 0

    def next_id(self, table: str) -> int:
        self._ids[table] += 1
        return self._ids[table]

    def now(self) -> datetime:
        """Strictly increasing timestamps so newest-first ordering is stable."""
        self._ticks += 1
        return _EPOCH + timedelta(seconds=self._ticks)

    # -- fixtures --

    def add_client(
        self,
        name: str = "Alpha Lending",
        billing_type: BillingType = BillingType.PREPAID,
        credit_balance: str | Decimal = "10.00",
        is_active: bool = True,
    ) -> ClientAccount:
        client = ClientAccount(
            id=self.next_id("clients"),
            name=name,
            billing_type=billing_type,
            credit_balance=Decimal(credit_balance),
            is_active=is_active,
        )
        self.clients[client.id] = client
        return client

    def add_user(
        self,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.AFFILIATE,
        client: ClientAccount | None = None,
        email: str | None = None,
        **kwargs,
    ) -> UserProfile:
        user = UserProfile(
            id=self.next_id("users"),
            email=email or f"{first_name.lower()}.{last_name.lower()}@example.com",
            role=role,
            client_id=client.id if client else None,
            client_name=client.name if client else None,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )
        self.users[user.id] = user
        return user

    def add_record(self, type: RecordType = RecordType.INDIVIDUAL, **fields) -> NegativeRecordData:
        record = NegativeRecordData(id=self.next_id("records"), type=type, **fields)
        self.records[record.id] = record
        return record

    def add_lock(self, record_id: int, user_id: int) -> LockState:
        """Lock a record as a prior search would have, history included."""
        lock = LockState(record_id=record_id, locked_by=user_id, locked_at=self.now())
        self.locks[record_id] = lock
        self.lock_history.append(
            LockHistoryEntry(
                id=self.next_id("lock_history"),
                record_id=record_id,
                locked_by=user_id,
                action=LockAction.LOCK_CREATED,
                created_at=lock.locked_at,
            )
        )
        return lock

    def history_for(self, record_id: int) -> list[LockHistoryEntry]:
        return [h for h in self.lock_history if h.record_id == record_id]


class InMemoryRecordStore:
    def __init__(self, db: InMemoryDatabase):
        self.db = db
        self._undo: list | None = None
        self._held: list[asyncio.Lock] = []

    @asynccontextmanager
    async def atomic(self):
        self._undo = []
        try:
            yield
        except BaseException:
            for undo in reversed(self._undo):
                undo()
            raise
        finally:
            self._undo = None
            while self._held:
                self._held.pop().release()

    def _on_rollback(self, undo) -> None:
        if self._undo is not None:
            self._undo.append(undo)

    def _append(self, rows: list, row) -> None:
        rows.append(row)
        self._on_rollback(lambda: rows.remove(row))

    def _put(self, table: dict, key, row) -> None:
        missing = object()
        previous = table.get(key, missing)
        table[key] = row
        if previous is missing:
            self._on_rollback(lambda: table.pop(key, None))
        else:
            self._on_rollback(lambda: table.__setitem__(key, previous))

    # -- clients / users --

    async def get_client(self, client_id):
        await asyncio.sleep(0)
        return self.db.clients.get(client_id)

    async def get_user(self, user_id):
        await asyncio.sleep(0)
        return self.db.users.get(user_id)

    async def list_admin_user_ids(self):
        await asyncio.sleep(0)
        return sorted(
            u.id
            for u in self.db.users.values()
            if u.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN) and u.is_approved
        )

    # -- records --

    async def find_records(self, criteria: RecordCriteria, limit):
        await asyncio.sleep(0)

        def contains(value, needle):
            return needle.strip().lower() in (value or "").lower()

        hits = []
        for record in sorted(self.db.records.values(), key=lambda r: r.id):
            if record.type != criteria.type:
                continue
            if criteria.type == RecordType.COMPANY:
                matched = contains(record.company_name, criteria.term or "")
            elif criteria.has_name():
                pairs = zip(
                    (record.first_name, record.middle_name, record.last_name),
                    criteria.names(),
                    strict=True,
                )
                matched = all(
                    contains(value, wanted) for value, wanted in pairs if wanted and wanted.strip()
                )
            else:
                term = criteria.term or ""
                matched = any(
                    contains(v, term)
                    for v in (record.first_name, record.middle_name, record.last_name)
                )
            if matched:
                hits.append(record)
        return hits[:limit]

    async def get_record(self, record_id, *, for_update=False):
        await asyncio.sleep(0)
        record = self.db.records.get(record_id)
        if record is not None and for_update:
            guard = self.db.row_guards[record_id]
            await guard.acquire()
            self._held.append(guard)
        return record

    async def create_record(self, fields):
        await asyncio.sleep(0)
        record = NegativeRecordData(id=self.db.next_id("records"), **fields)
        self._put(self.db.records, record.id, record)
        return record

    # -- locks --

    async def get_lock(self, record_id):
        await asyncio.sleep(0)
        return self.db.locks.get(record_id)

    async def get_locks(self, record_ids):
        await asyncio.sleep(0)
        return {rid: self.db.locks[rid] for rid in record_ids if rid in self.db.locks}

    async def insert_lock_if_absent(self, record_id, user_id):
        await asyncio.sleep(0)
        if record_id in self.db.locks:
            return None
        lock = LockState(record_id=record_id, locked_by=user_id, locked_at=self.db.now())
        self._put(self.db.locks, record_id, lock)
        return lock

    async def transfer_lock(self, record_id, user_id):
        await asyncio.sleep(0)
        if record_id not in self.db.locks:
            return None
        lock = LockState(record_id=record_id, locked_by=user_id, locked_at=self.db.now())
        self._put(self.db.locks, record_id, lock)
        return lock

    async def append_lock_history(self, record_id, user_id, action: LockAction):
        await asyncio.sleep(0)
        entry = LockHistoryEntry(
            id=self.db.next_id("lock_history"),
            record_id=record_id,
            locked_by=user_id,
            action=action,
            created_at=self.db.now(),
        )
        self._append(self.db.lock_history, entry)
        return entry

    async def list_lock_history(self, record_id):
        await asyncio.sleep(0)
        return self.db.history_for(record_id)

    # -- search logs --

    async def add_search_log(self, user_id, client_id, search_type, search_term, is_billed, fee):
        await asyncio.sleep(0)
        entry = SearchLogEntry(
            id=self.db.next_id("search_logs"),
            user_id=user_id,
            client_id=client_id,
            search_type=search_type,
            search_term=search_term,
            is_billed=is_billed,
            fee=fee,
            created_at=self.db.now(),
        )
        self._append(self.db.search_logs, entry)
        return entry

    async def list_search_logs_by_term(self, search_term, limit):
        await asyncio.sleep(0)
        matches = [e for e in reversed(self.db.search_logs) if e.search_term == search_term]
        out = []
        for entry in matches[:limit]:
            user = self.db.users.get(entry.user_id)
            client = self.db.clients.get(entry.client_id)
            out.append(
                replace(
                    entry,
                    user_name=user.full_name if user else None,
                    client_name=client.name if client else None,
                )
            )
        return out

    async def list_search_logs_for_user(self, user_id, offset, limit):
        await asyncio.sleep(0)
        mine = [e for e in reversed(self.db.search_logs) if e.user_id == user_id]
        return mine[offset : offset + limit], len(mine)

    # -- unlock requests --

    def _pending(self, user_id, record_id):
        for request in self.db.requests.values():
            if (
                request.requested_by == user_id
                and request.record_id == record_id
                and request.status == UnlockRequestStatus.PENDING
            ):
                return request
        return None

    async def pending_request_record_ids(self, user_id, record_ids):
        await asyncio.sleep(0)
        return {rid for rid in record_ids if self._pending(user_id, rid) is not None}

    async def find_pending_request(self, user_id, record_id):
        await asyncio.sleep(0)
        return self._pending(user_id, record_id)

    async def insert_pending_request(self, user_id, record_id, reason):
        await asyncio.sleep(0)
        if self._pending(user_id, record_id) is not None:
            return None
        request = UnlockRequestData(
            id=self.db.next_id("requests"),
            requested_by=user_id,
            record_id=record_id,
            status=UnlockRequestStatus.PENDING,
            reason=reason,
            created_at=self.db.now(),
        )
        self._put(self.db.requests, request.id, request)
        return request

    async def get_request(self, request_id):
        await asyncio.sleep(0)
        return self.db.requests.get(request_id)

    async def resolve_pending_request(self, request_id, status, reviewer_id, denial_reason=None):
        await asyncio.sleep(0)
        request = self.db.requests.get(request_id)
        if request is None or request.status != UnlockRequestStatus.PENDING:
            return None
        resolved = replace(
            request,
            status=status,
            reviewed_by=reviewer_id,
            reviewed_at=self.db.now(),
            denial_reason=denial_reason,
        )
        self._put(self.db.requests, request_id, resolved)
        return resolved

    async def deny_other_pending(self, record_id, exclude_request_id, reviewer_id):
        await asyncio.sleep(0)
        denied = []
        for request in list(self.db.requests.values()):
            if (
                request.record_id == record_id
                and request.id != exclude_request_id
                and request.status == UnlockRequestStatus.PENDING
            ):
                updated = replace(
                    request,
                    status=UnlockRequestStatus.DENIED,
                    reviewed_by=reviewer_id,
                    reviewed_at=self.db.now(),
                )
                self._put(self.db.requests, request.id, updated)
                denied.append(updated)
        return denied

    async def list_requests(
        self, *, requested_by=None, held_by=None, status=None, offset=0, limit=20
    ):
        await asyncio.sleep(0)
        rows = list(self.db.requests.values())
        if requested_by is not None:
            rows = [r for r in rows if r.requested_by == requested_by]
        if held_by is not None:
            rows = [
                r
                for r in rows
                if r.record_id in self.db.locks and self.db.locks[r.record_id].locked_by == held_by
            ]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        rows.sort(key=lambda r: r.id, reverse=True)
        return rows[offset : offset + limit], len(rows)

    # -- credit ledger --

    async def deduct_credit(self, client_id, amount):
        await asyncio.sleep(0)
        client = self.db.clients.get(client_id)
        if client is None or client.credit_balance < amount:
            return None
        updated = replace(client, credit_balance=client.credit_balance - amount)
        self._put(self.db.clients, client_id, updated)
        return updated.credit_balance

    async def add_credit(self, client_id, amount):
        await asyncio.sleep(0)
        client = self.db.clients.get(client_id)
        if client is None:
            return None
        updated = replace(client, credit_balance=client.credit_balance + amount)
        self._put(self.db.clients, client_id, updated)
        return updated.credit_balance

    async def add_credit_transaction(
        self, client_id, amount, type: CreditTransactionType, description, performed_by
    ):
        await asyncio.sleep(0)
        entry = CreditTransactionData(
            id=self.db.next_id("transactions"),
            client_id=client_id,
            amount=amount,
            type=type,
            description=description,
            performed_by=performed_by,
            created_at=self.db.now(),
        )
        self._append(self.db.transactions, entry)
        return entry

    async def list_credit_transactions(self, client_id, offset, limit):
        await asyncio.sleep(0)
        rows = [t for t in reversed(self.db.transactions) if t.client_id == client_id]
        return rows[offset : offset + limit], len(rows)
