# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, SessionLocal, get_db, get_db_service
from .enums import (
    BillingType,
    CreditTransactionType,
    LockAction,
    NotificationType,
    RecordType,
    UnlockRequestStatus,
    UserRole,
)
from .models import (
    AuditEvent,
    Client,
    CreditTransaction,
    DemoDataManifest,
    LockHistory,
    NegativeRecord,
    Notification,
    RecordLock,
    SearchLog,
    UnlockRequest,
    User,
)

__all__ = [
    "Base",
    "DatabaseService",
    "SessionLocal",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "BillingType",
    "CreditTransactionType",
    "LockAction",
    "NotificationType",
    "RecordType",
    "UnlockRequestStatus",
    "UserRole",
    # Models
    "AuditEvent",
    "Client",
    "CreditTransaction",
    "DemoDataManifest",
    "LockHistory",
    "NegativeRecord",
    "Notification",
    "RecordLock",
    "SearchLog",
    "UnlockRequest",
    "User",
]
