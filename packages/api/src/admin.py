# This project was developed with assistance from AI tools.
"""
SQLAdmin configuration for database administration UI

Access the admin panel at: http://localhost:8000/admin

When AUTH_DISABLED=false, requires admin credentials via login form.
When AUTH_DISABLED=true, admin panel is open (dev mode).

Locks, lock history, search logs, credit transactions and audit events are
read-only here: every mutation of those goes through the API so the ledgers
and the single-holder guarantee stay consistent.
"""

from db import (
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
from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from sqlalchemy import create_engine
from starlette.requests import Request
from starlette.responses import Response

from .core.config import settings

# SQLAdmin requires a sync engine; derive from the async DATABASE_URL
_sync_url = settings.DATABASE_URL.replace("+asyncpg", "")
engine = create_engine(_sync_url, echo=False)


class AdminAuth(AuthenticationBackend):
    """Session-based auth gate for SQLAdmin.

    When AUTH_DISABLED=true, authenticate() always returns True (dev mode).
    Otherwise, requires login with SQLADMIN_USER / SQLADMIN_PASSWORD.
    """

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = form.get("username")
        password = form.get("password")
        if username == settings.SQLADMIN_USER and password == settings.SQLADMIN_PASSWORD:
            request.session.update({"admin_authenticated": True})
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> Response | bool:
        if settings.AUTH_DISABLED:
            return True
        return request.session.get("admin_authenticated", False)


class ReadOnlyView(ModelView):
    can_create = False
    can_edit = False
    can_delete = False


class ClientAdmin(ModelView, model=Client):
    column_list = [
        Client.id,
        Client.client_code,
        Client.name,
        Client.billing_type,
        Client.credit_balance,
        Client.is_active,
    ]
    column_searchable_list = [Client.client_code, Client.name]
    column_sortable_list = [Client.id, Client.name, Client.credit_balance]
    # Balance moves only through the top-up and print endpoints.
    form_excluded_columns = [Client.credit_balance, Client.users, Client.credit_transactions]
    name = "Client"
    name_plural = "Clients"
    icon = "fa-solid fa-building"


class UserAdmin(ModelView, model=User):
    column_list = [
        User.id,
        User.email,
        User.role,
        User.client_id,
        User.is_approved,
        User.created_at,
    ]
    column_searchable_list = [User.email, User.last_name]
    column_sortable_list = [User.id, User.email, User.role]
    column_default_sort = [(User.created_at, True)]
    can_delete = False
    name = "User"
    name_plural = "Users"
    icon = "fa-solid fa-user"


class NegativeRecordAdmin(ModelView, model=NegativeRecord):
    column_list = [
        NegativeRecord.id,
        NegativeRecord.type,
        NegativeRecord.last_name,
        NegativeRecord.first_name,
        NegativeRecord.company_name,
        NegativeRecord.case_no,
        NegativeRecord.date_filed,
    ]
    column_searchable_list = [
        NegativeRecord.last_name,
        NegativeRecord.first_name,
        NegativeRecord.company_name,
        NegativeRecord.case_no,
    ]
    column_sortable_list = [NegativeRecord.id, NegativeRecord.type, NegativeRecord.date_filed]
    form_excluded_columns = [NegativeRecord.lock, NegativeRecord.unlock_requests]
    can_delete = False
    name = "Negative Record"
    name_plural = "Negative Records"
    icon = "fa-solid fa-file-circle-exclamation"


class RecordLockAdmin(ReadOnlyView, model=RecordLock):
    column_list = [RecordLock.id, RecordLock.record_id, RecordLock.locked_by, RecordLock.locked_at]
    column_default_sort = [(RecordLock.locked_at, True)]
    name = "Record Lock"
    name_plural = "Record Locks"
    icon = "fa-solid fa-lock"


class LockHistoryAdmin(ReadOnlyView, model=LockHistory):
    column_list = [
        LockHistory.id,
        LockHistory.record_id,
        LockHistory.locked_by,
        LockHistory.action,
        LockHistory.created_at,
    ]
    column_default_sort = [(LockHistory.id, True)]
    name = "Lock History"
    name_plural = "Lock History"
    icon = "fa-solid fa-clock-rotate-left"


class UnlockRequestAdmin(ReadOnlyView, model=UnlockRequest):
    column_list = [
        UnlockRequest.id,
        UnlockRequest.record_id,
        UnlockRequest.requested_by,
        UnlockRequest.status,
        UnlockRequest.reviewed_by,
        UnlockRequest.created_at,
    ]
    column_sortable_list = [UnlockRequest.id, UnlockRequest.status, UnlockRequest.created_at]
    column_default_sort = [(UnlockRequest.created_at, True)]
    name = "Unlock Request"
    name_plural = "Unlock Requests"
    icon = "fa-solid fa-key"


class SearchLogAdmin(ReadOnlyView, model=SearchLog):
    column_list = [
        SearchLog.id,
        SearchLog.user_id,
        SearchLog.client_id,
        SearchLog.search_type,
        SearchLog.search_term,
        SearchLog.created_at,
    ]
    column_searchable_list = [SearchLog.search_term]
    column_default_sort = [(SearchLog.created_at, True)]
    name = "Search Log"
    name_plural = "Search Logs"
    icon = "fa-solid fa-magnifying-glass"


class CreditTransactionAdmin(ReadOnlyView, model=CreditTransaction):
    column_list = [
        CreditTransaction.id,
        CreditTransaction.client_id,
        CreditTransaction.type,
        CreditTransaction.amount,
        CreditTransaction.performed_by,
        CreditTransaction.created_at,
    ]
    column_default_sort = [(CreditTransaction.created_at, True)]
    name = "Credit Transaction"
    name_plural = "Credit Transactions"
    icon = "fa-solid fa-coins"


class NotificationAdmin(ReadOnlyView, model=Notification):
    column_list = [
        Notification.id,
        Notification.user_id,
        Notification.type,
        Notification.title,
        Notification.is_read,
        Notification.created_at,
    ]
    column_default_sort = [(Notification.created_at, True)]
    name = "Notification"
    name_plural = "Notifications"
    icon = "fa-solid fa-bell"


class AuditEventAdmin(ReadOnlyView, model=AuditEvent):
    column_list = [
        AuditEvent.id,
        AuditEvent.timestamp,
        AuditEvent.action,
        AuditEvent.module,
        AuditEvent.user_id,
        AuditEvent.record_id,
    ]
    column_sortable_list = [AuditEvent.id, AuditEvent.timestamp, AuditEvent.action]
    column_default_sort = [(AuditEvent.timestamp, True)]
    name = "Audit Event"
    name_plural = "Audit Events"
    icon = "fa-solid fa-shield-alt"


class DemoDataManifestAdmin(ReadOnlyView, model=DemoDataManifest):
    column_list = [DemoDataManifest.id, DemoDataManifest.seeded_at, DemoDataManifest.config_hash]
    name = "Seed Manifest"
    name_plural = "Seed Manifests"
    icon = "fa-solid fa-database"


def setup_admin(app):
    """Set up SQLAdmin and mount it to the FastAPI app."""
    auth_backend = AdminAuth(
        secret_key=settings.SQLADMIN_SECRET_KEY,
    )
    admin = Admin(app, engine, title="Negative Records Admin", authentication_backend=auth_backend)

    for view in (
        ClientAdmin,
        UserAdmin,
        NegativeRecordAdmin,
        RecordLockAdmin,
        LockHistoryAdmin,
        UnlockRequestAdmin,
        SearchLogAdmin,
        CreditTransactionAdmin,
        NotificationAdmin,
        AuditEventAdmin,
        DemoDataManifestAdmin,
    ):
        admin.add_view(view)

    return admin
