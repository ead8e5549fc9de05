# This project was developed with assistance from AI tools.
"""Functional tests: admin-only surfaces and the notification inbox."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from db.enums import NotificationType

from .mock_db import make_mock_session

pytestmark = pytest.mark.functional


class TestRecordAdministration:
    def test_admin_creates_record(self, make_client, world):
        resp = make_client(world.admin).post(
            "/api/records",
            json={
                "type": "Company",
                "company_name": "Northpoint Telecom Resellers",
                "telecom": "Y",
            },
        )

        assert resp.status_code == 201
        record_id = resp.json()["id"]
        assert world.db.records[record_id].company_name == "Northpoint Telecom Resellers"

    def test_affiliate_cannot_create_record(self, make_client, world):
        resp = make_client(world.maria).post(
            "/api/records", json={"type": "Company", "company_name": "X"}
        )
        assert resp.status_code == 403

    def test_lock_history_for_admin(self, make_client, world):
        world.db.add_lock(world.juan.id, world.maria.id)

        resp = make_client(world.super_admin).get(f"/api/records/{world.juan.id}/lock-history")

        assert resp.status_code == 200
        [entry] = resp.json()["data"]
        assert entry["action"] == "LOCK_CREATED"
        assert entry["locked_by"] == world.maria.id


class TestAdminOnlyEndpoints:
    """Admin-only endpoints reject affiliates."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("post", "/api/admin/seed"),
            ("get", "/api/admin/seed/status"),
            ("get", "/api/admin/audit"),
            ("get", "/api/admin/audit/verify"),
        ],
    )
    def test_affiliate_rejected(self, make_client, world, method, path):
        client = make_client(world.maria)
        resp = getattr(client, method)(path)
        assert resp.status_code == 403
        assert resp.json()["title"] == "Forbidden"

    def test_seed_status_accessible(self, make_client, world):
        session = make_mock_session()
        resp = make_client(world.admin, session).get("/api/admin/seed/status")

        assert resp.status_code == 200
        assert resp.json()["seeded"] is False


class TestNotificationInbox:
    def _notification(self, user_id, **fields):
        n = MagicMock()
        n.id = fields.get("id", 1)
        n.user_id = user_id
        n.type = NotificationType.UNLOCK_REQUEST_RECEIVED
        n.title = "New unlock request"
        n.message = "Jose Reyes requested Juan Perez Dela Cruz"
        n.related_id = 4
        n.is_read = fields.get("is_read", False)
        n.created_at = datetime(2026, 1, 1, 9, 0, tzinfo=UTC)
        return n

    def test_list_notifications(self, make_client, world):
        session = make_mock_session(items=[self._notification(world.maria.id)])

        resp = make_client(world.maria, session).get("/api/notifications")

        assert resp.status_code == 200
        body = resp.json()
        assert body["pagination"]["total"] == 1
        assert body["data"][0]["type"] == "unlock_request_received"

    def test_unread_count(self, make_client, world):
        resp = make_client(world.maria, make_mock_session(count=3)).get(
            "/api/notifications/unread-count"
        )
        assert resp.json() == {"count": 3}

    def test_mark_foreign_notification_is_404(self, make_client, world):
        session = make_mock_session(single=None)

        resp = make_client(world.maria, session).patch("/api/notifications/77/read")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Notification not found"


class TestAppShell:
    def test_root(self, app):
        from fastapi.testclient import TestClient

        resp = TestClient(app).get("/")
        assert resp.json() == {"message": "Welcome to the Negative Records API"}

    def test_health_degraded_is_503(self, app):
        from unittest.mock import AsyncMock

        from db import get_db_service
        from fastapi.testclient import TestClient

        db_service = MagicMock()
        db_service.health_check = AsyncMock(return_value=False)
        app.dependency_overrides[get_db_service] = lambda: db_service

        resp = TestClient(app).get("/health/")

        assert resp.status_code == 503
        assert resp.json() == {"status": "degraded", "database": "unavailable"}
