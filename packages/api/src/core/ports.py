# This project was developed with assistance from AI tools.
"""Persistence port for the access-arbitration core.

The arbitrator and the billing gate depend on ``RecordStore`` only; the
SQLAlchemy adapter lives in ``services/sql_store.py``.  Values crossing the
port are frozen dataclasses so core logic never touches live ORM rows.
"""

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol, runtime_checkable

from db.enums import (
    BillingType,
    CreditTransactionType,
    LockAction,
    RecordType,
    UnlockRequestStatus,
    UserRole,
)


def normalize_term(*parts: str | None) -> str:
    """Lowercased, space-joined non-empty parts.

    Search logs store this form, and lock-info matches a record's own
    normalized name against it to build access history.
    """
    return " ".join(p.strip().lower() for p in parts if p and p.strip())


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, resolved to a local user row."""

    user_id: int
    role: UserRole
    client_id: int | None = None
    is_approved: bool = True


@dataclass(frozen=True)
class ClientAccount:
    id: int
    name: str
    billing_type: BillingType
    credit_balance: Decimal
    credit_limit: Decimal | None = None
    is_active: bool = True


@dataclass(frozen=True)
class UserProfile:
    id: int
    email: str
    role: UserRole
    client_id: int | None = None
    client_name: str | None = None
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    mobile_number: str | None = None
    telephone: str | None = None
    is_approved: bool = True

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p) or self.email


@dataclass(frozen=True)
class NegativeRecordData:
    id: int
    type: RecordType
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    company_name: str | None = None
    alias: str | None = None
    case_no: str | None = None
    plaintiff: str | None = None
    case_type: str | None = None
    court_type: str | None = None
    branch: str | None = None
    city: str | None = None
    date_filed: date | None = None
    details: str | None = None
    source: str | None = None
    bounce: str | None = None
    decline: str | None = None
    delinquent: str | None = None
    telecom: str | None = None
    watch: str | None = None
    is_scanned: bool = False

    @property
    def normalized_name(self) -> str:
        if self.type == RecordType.COMPANY:
            return normalize_term(self.company_name)
        return normalize_term(self.first_name, self.middle_name, self.last_name)


@dataclass(frozen=True)
class LockState:
    record_id: int
    locked_by: int
    locked_at: datetime


@dataclass(frozen=True)
class LockHistoryEntry:
    id: int
    record_id: int
    locked_by: int
    action: LockAction
    created_at: datetime


@dataclass(frozen=True)
class UnlockRequestData:
    id: int
    requested_by: int
    record_id: int
    status: UnlockRequestStatus
    reason: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    denial_reason: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class SearchLogEntry:
    id: int
    user_id: int
    client_id: int
    search_type: RecordType
    search_term: str
    is_billed: bool
    fee: Decimal
    created_at: datetime
    user_name: str | None = None
    client_name: str | None = None


@dataclass(frozen=True)
class CreditTransactionData:
    id: int
    client_id: int
    amount: Decimal
    type: CreditTransactionType
    description: str | None
    performed_by: int
    created_at: datetime


@dataclass(frozen=True)
class RecordCriteria:
    """Search input: a name triple or a free term, scoped by record type."""

    type: RecordType
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    term: str | None = None

    def names(self) -> tuple[str | None, str | None, str | None]:
        return (self.first_name, self.middle_name, self.last_name)

    def has_name(self) -> bool:
        return any(p and p.strip() for p in self.names())

    def normalized(self) -> str:
        if self.type == RecordType.INDIVIDUAL and self.has_name():
            return normalize_term(*self.names())
        return normalize_term(self.term)


@runtime_checkable
class RecordStore(Protocol):
    """Narrow persistence operations the core needs.

    Every mutating core operation runs inside ``atomic()``.  Guarded
    operations (``insert_lock_if_absent``, ``insert_pending_request``,
    ``resolve_pending_request``, ``deduct_credit``) must be single atomic
    statements at the storage layer, never read-then-write.
    """

    def atomic(self) -> AbstractAsyncContextManager[None]: ...

    # -- clients / users --
    async def get_client(self, client_id: int) -> ClientAccount | None: ...

    async def get_user(self, user_id: int) -> UserProfile | None: ...

    async def list_admin_user_ids(self) -> list[int]: ...

    # -- records --
    async def find_records(
        self, criteria: RecordCriteria, limit: int
    ) -> list[NegativeRecordData]: ...

    async def get_record(
        self, record_id: int, *, for_update: bool = False
    ) -> NegativeRecordData | None: ...

    async def create_record(self, fields: dict) -> NegativeRecordData: ...

    # -- locks --
    async def get_lock(self, record_id: int) -> LockState | None: ...

    async def get_locks(self, record_ids: list[int]) -> dict[int, LockState]: ...

    async def insert_lock_if_absent(self, record_id: int, user_id: int) -> LockState | None:
        """Create the lock; ``None`` when a lock for the record already exists."""
        ...

    async def transfer_lock(self, record_id: int, user_id: int) -> LockState | None:
        """Reassign an existing lock; ``None`` when the record has no lock."""
        ...

    async def append_lock_history(
        self, record_id: int, user_id: int, action: LockAction
    ) -> LockHistoryEntry: ...

    async def list_lock_history(self, record_id: int) -> list[LockHistoryEntry]: ...

    # -- search logs --
    async def add_search_log(
        self,
        user_id: int,
        client_id: int,
        search_type: RecordType,
        search_term: str,
        is_billed: bool,
        fee: Decimal,
    ) -> SearchLogEntry: ...

    async def list_search_logs_by_term(
        self, search_term: str, limit: int
    ) -> list[SearchLogEntry]: ...

    async def list_search_logs_for_user(
        self, user_id: int, offset: int, limit: int
    ) -> tuple[list[SearchLogEntry], int]: ...

    # -- unlock requests --
    async def pending_request_record_ids(
        self, user_id: int, record_ids: list[int]
    ) -> set[int]: ...

    async def find_pending_request(
        self, user_id: int, record_id: int
    ) -> UnlockRequestData | None: ...

    async def insert_pending_request(
        self, user_id: int, record_id: int, reason: str | None
    ) -> UnlockRequestData | None:
        """Insert a pending request; ``None`` when one is already pending."""
        ...

    async def get_request(self, request_id: int) -> UnlockRequestData | None: ...

    async def resolve_pending_request(
        self,
        request_id: int,
        status: UnlockRequestStatus,
        reviewer_id: int,
        denial_reason: str | None = None,
    ) -> UnlockRequestData | None:
        """Move a pending request to ``status``; ``None`` when it is not pending."""
        ...

    async def deny_other_pending(
        self, record_id: int, exclude_request_id: int, reviewer_id: int
    ) -> list[UnlockRequestData]: ...

    async def list_requests(
        self,
        *,
        requested_by: int | None = None,
        held_by: int | None = None,
        status: UnlockRequestStatus | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[UnlockRequestData], int]: ...

    # -- credit ledger --
    async def deduct_credit(self, client_id: int, amount: Decimal) -> Decimal | None:
        """Decrement when balance >= amount; new balance, or ``None`` if short."""
        ...

    async def add_credit(self, client_id: int, amount: Decimal) -> Decimal | None: ...

    async def add_credit_transaction(
        self,
        client_id: int,
        amount: Decimal,
        type: CreditTransactionType,
        description: str | None,
        performed_by: int,
    ) -> CreditTransactionData: ...

    async def list_credit_transactions(
        self, client_id: int, offset: int, limit: int
    ) -> tuple[list[CreditTransactionData], int]: ...
