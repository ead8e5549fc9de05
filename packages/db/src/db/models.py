# This project was developed with assistance from AI tools.
"""
Negative records registry -- domain models

Affiliate clients and their users, negative records, the single-owner
record lock with its history, unlock requests, search logs, the credit
ledger, notifications, and the audit trail.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import (
    BillingType,
    CreditTransactionType,
    LockAction,
    NotificationType,
    RecordType,
    UnlockRequestStatus,
    UserRole,
)


class Client(Base):
    """Affiliate organization that bears billing for its users' actions."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_code = Column(String(50), unique=True, nullable=False)
    name = Column(String(150), nullable=False)
    email = Column(String(150), nullable=True)
    telephone = Column(String(50), nullable=True)
    billing_type = Column(
        Enum(BillingType, name="billing_type", native_enum=False),
        nullable=False,
        default=BillingType.POSTPAID,
    )
    credit_balance = Column(Numeric(12, 2), nullable=False, default=0, server_default="0")
    # Only meaningful for Prepaid clients.
    credit_limit = Column(Numeric(12, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    users = relationship("User", back_populates="client")
    credit_transactions = relationship("CreditTransaction", back_populates="client")

    def __repr__(self):
        return f"<Client(id={self.id}, code='{self.client_code}', billing='{self.billing_type}')>"


class User(Base):
    """Local profile for a Keycloak identity."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    keycloak_user_id = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    role = Column(
        Enum(UserRole, name="user_role", native_enum=False),
        nullable=False,
        default=UserRole.AFFILIATE,
    )
    client_id = Column(
        Integer, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    is_approved = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    first_name = Column(String(80), nullable=True)
    middle_name = Column(String(80), nullable=True)
    last_name = Column(String(80), nullable=True)
    mobile_number = Column(String(50), nullable=True)
    telephone = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    client = relationship("Client", back_populates="users")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class NegativeRecord(Base):
    """Adverse legal/credit history entry for an individual or a company."""

    __tablename__ = "negative_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(
        Enum(RecordType, name="record_type", native_enum=False),
        nullable=False,
        index=True,
    )
    first_name = Column(String(120), nullable=True)
    middle_name = Column(String(120), nullable=True)
    last_name = Column(String(120), nullable=True, index=True)
    company_name = Column(String(200), nullable=True, index=True)
    alias = Column(String(200), nullable=True)
    case_no = Column(String(100), nullable=True)
    plaintiff = Column(String(200), nullable=True)
    case_type = Column(String(100), nullable=True)
    court_type = Column(String(100), nullable=True)
    branch = Column(String(100), nullable=True)
    city = Column(String(150), nullable=True)
    date_filed = Column(Date, nullable=True)
    details = Column(Text, nullable=True)
    source = Column(String(255), nullable=True)
    bounce = Column(String(50), nullable=True)
    decline = Column(String(50), nullable=True)
    delinquent = Column(String(50), nullable=True)
    telecom = Column(String(50), nullable=True)
    watch = Column(String(50), nullable=True)
    is_scanned = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    lock = relationship("RecordLock", back_populates="record", uselist=False)
    unlock_requests = relationship("UnlockRequest", back_populates="record")

    def __repr__(self):
        return f"<NegativeRecord(id={self.id}, type='{self.type}')>"


class RecordLock(Base):
    """Current single owner of a record. At most one row per record."""

    __tablename__ = "record_locks"
    __table_args__ = (
        UniqueConstraint("record_id", name="uq_record_locks_record_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    record_id = Column(
        Integer, ForeignKey("negative_records.id", ondelete="CASCADE"), nullable=False,
    )
    locked_by = Column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True,
    )
    locked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    record = relationship("NegativeRecord", back_populates="lock")
    holder = relationship("User")

    def __repr__(self):
        return f"<RecordLock(record_id={self.record_id}, locked_by={self.locked_by})>"


class LockHistory(Base):
    """Append-only ledger of lock ownership transitions."""

    __tablename__ = "lock_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    record_id = Column(
        Integer, ForeignKey("negative_records.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    locked_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    action = Column(
        Enum(LockAction, name="lock_action", native_enum=False),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<LockHistory(record_id={self.record_id}, action='{self.action}')>"


class UnlockRequest(Base):
    """Petition by a non-holder to take over a record's lock."""

    __tablename__ = "unlock_requests"
    __table_args__ = (
        Index(
            "uq_unlock_requests_pending",
            "requested_by",
            "record_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    requested_by = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    record_id = Column(
        Integer, ForeignKey("negative_records.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    status = Column(
        Enum(UnlockRequestStatus, name="unlock_request_status", native_enum=False),
        nullable=False,
        default=UnlockRequestStatus.PENDING,
        index=True,
    )
    reason = Column(Text, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    denial_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    record = relationship("NegativeRecord", back_populates="unlock_requests")
    requester = relationship("User", foreign_keys=[requested_by])

    def __repr__(self):
        return f"<UnlockRequest(id={self.id}, record_id={self.record_id}, status='{self.status}')>"


class SearchLog(Base):
    """One row per search attempt. Append-only."""

    __tablename__ = "search_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    search_type = Column(
        Enum(RecordType, name="record_type", native_enum=False),
        nullable=False,
    )
    search_term = Column(String(255), nullable=False, index=True)
    is_billed = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    fee = Column(Numeric(10, 2), nullable=False, default=0, server_default="0")
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    user = relationship("User")
    client = relationship("Client")

    def __repr__(self):
        return f"<SearchLog(id={self.id}, term='{self.search_term}')>"


class CreditTransaction(Base):
    """Audit row for every credit balance mutation."""

    __tablename__ = "credit_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(
        Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(
        Enum(CreditTransactionType, name="credit_transaction_type", native_enum=False),
        nullable=False,
    )
    description = Column(String(255), nullable=True)
    performed_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    client = relationship("Client", back_populates="credit_transactions")

    def __repr__(self):
        return (
            f"<CreditTransaction(client_id={self.client_id}, type='{self.type}', "
            f"amount={self.amount})>"
        )


class Notification(Base):
    """User-facing inbox entry."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    type = Column(
        Enum(NotificationType, name="notification_type", native_enum=False),
        nullable=False,
    )
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(Integer, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}')>"


class AuditEvent(Base):
    """Append-only audit trail. INSERT + SELECT only -- no UPDATE or DELETE."""

    __tablename__ = "audit_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    prev_hash = Column(String(64), nullable=True)
    user_id = Column(Integer, nullable=True, index=True)
    action = Column(String(100), nullable=False, index=True)
    module = Column(String(100), nullable=False)
    record_id = Column(Integer, nullable=True, index=True)
    event_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<AuditEvent(id={self.id}, action='{self.action}')>"


class DemoDataManifest(Base):
    """Tracks demo data seeding for idempotency."""

    __tablename__ = "demo_data_manifest"

    id = Column(Integer, primary_key=True, autoincrement=True)
    seeded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    config_hash = Column(String(64), nullable=False)
    summary = Column(Text, nullable=True)

    def __repr__(self):
        return f"<DemoDataManifest(id={self.id}, seeded_at='{self.seeded_at}')>"
