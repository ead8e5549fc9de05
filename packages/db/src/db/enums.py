# This project was developed with assistance from AI tools.
"""
Domain enums for negative-record access arbitration.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas / core logic (api package).
"""

import enum


class UserRole(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    AFFILIATE = "affiliate"


class RecordType(str, enum.Enum):
    INDIVIDUAL = "Individual"
    COMPANY = "Company"


class BillingType(str, enum.Enum):
    PREPAID = "Prepaid"
    POSTPAID = "Postpaid"


class LockAction(str, enum.Enum):
    LOCK_CREATED = "LOCK_CREATED"
    LOCK_TRANSFERRED = "LOCK_TRANSFERRED"


class UnlockRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"

    @classmethod
    def review_outcomes(cls) -> frozenset["UnlockRequestStatus"]:
        """Statuses a reviewer may move a pending request into."""
        return frozenset({cls.APPROVED, cls.DENIED})


class CreditTransactionType(str, enum.Enum):
    TOPUP = "topup"
    DEDUCTION = "deduction"


class NotificationType(str, enum.Enum):
    UNLOCK_REQUEST_SUBMITTED = "unlock_request_submitted"
    UNLOCK_REQUEST_RECEIVED = "unlock_request_received"
    UNLOCK_REQUEST_APPROVED = "unlock_request_approved"
    UNLOCK_REQUEST_DENIED = "unlock_request_denied"
