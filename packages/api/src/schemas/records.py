# This project was developed with assistance from AI tools.
"""Negative record, search and print schemas."""

from datetime import date, datetime
from decimal import Decimal

from db.enums import LockAction, RecordType
from pydantic import BaseModel, ConfigDict, Field

from . import Pagination


class RecordCreate(BaseModel):
    """Admin input for a new negative record."""

    type: RecordType
    first_name: str | None = Field(default=None, max_length=120)
    middle_name: str | None = Field(default=None, max_length=120)
    last_name: str | None = Field(default=None, max_length=120)
    company_name: str | None = Field(default=None, max_length=200)
    alias: str | None = Field(default=None, max_length=200)
    case_no: str | None = Field(default=None, max_length=100)
    plaintiff: str | None = Field(default=None, max_length=200)
    case_type: str | None = Field(default=None, max_length=100)
    court_type: str | None = Field(default=None, max_length=100)
    branch: str | None = Field(default=None, max_length=100)
    city: str | None = Field(default=None, max_length=150)
    date_filed: date | None = None
    details: str | None = None
    source: str | None = Field(default=None, max_length=255)
    bounce: str | None = None
    decline: str | None = None
    delinquent: str | None = None
    telecom: str | None = None
    watch: str | None = None
    is_scanned: bool = False


class RecordItem(BaseModel):
    """A negative record.  ``details`` and ``source`` are null unless the caller holds the lock."""

    model_config = ConfigDict(from_attributes=True)

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


class SearchResultItem(RecordItem):
    """One search hit with the caller's lock/visibility state."""

    is_locked: bool
    is_owner: bool
    has_pending_request: bool = False
    locked_by_name: str | None = None
    locked_by_affiliate: str | None = None
    locked_at: datetime | None = None


class SearchResponse(BaseModel):
    results: list[SearchResultItem]
    count: int
    billed: bool = False
    remaining_credit: Decimal


class LockOwner(BaseModel):
    """Contact profile of the current lock holder."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    mobile_number: str | None = None
    telephone: str | None = None
    client_name: str | None = None


class AccessHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    user_name: str | None = None
    client_name: str | None = None
    search_term: str
    created_at: datetime


class LockInfoResponse(BaseModel):
    record_id: int
    locked_at: datetime
    owner: LockOwner
    access_history: list[AccessHistoryItem]


class LockHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    record_id: int
    locked_by: int
    action: LockAction
    created_at: datetime


class LockHistoryResponse(BaseModel):
    record_id: int
    data: list[LockHistoryItem]


class PrintMeta(BaseModel):
    record_id: int
    printed_by: int
    printed_at: datetime


class PrintResponse(BaseModel):
    """JSON print result; ``format=pdf`` streams the document instead."""

    record: RecordItem
    print_meta: PrintMeta
    billed: bool
    fee: Decimal
    remaining_credit: Decimal


class SearchLogItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    search_type: RecordType
    search_term: str
    is_billed: bool
    fee: Decimal
    created_at: datetime


class SearchLogListResponse(BaseModel):
    data: list[SearchLogItem]
    pagination: Pagination
