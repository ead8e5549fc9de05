# This project was developed with assistance from AI tools.
"""App wiring utilities for functional tests.

Routes run against the real FastAPI app with auth, the record store and the
effect dispatcher replaced:
  1. ``get_current_user`` / ``get_current_actor`` -- the persona under test
  2. ``get_record_store`` -- an ``InMemoryRecordStore`` over a shared registry
  3. ``get_effect_dispatcher`` -- an ``EffectRecorder`` the test can inspect
"""

from unittest.mock import AsyncMock, MagicMock

from db import get_db

from src.middleware.auth import get_current_actor, get_current_user
from src.services.effects import get_effect_dispatcher
from src.services.sql_store import get_record_store

from ..fakes import InMemoryDatabase, InMemoryRecordStore
from .personas import Persona


class EffectRecorder:
    """Stands in for ``EffectDispatcher``; keeps effects instead of writing them."""

    def __init__(self):
        self.effects = []

    def __call__(self, effects) -> None:
        self.effects.extend(effects)

    def of_type(self, effect_type) -> list:
        return [e for e in self.effects if isinstance(e, effect_type)]


def make_mock_session(
    items: list | None = None,
    single: object | None = None,
    count: int | None = None,
) -> AsyncMock:
    """Build an AsyncMock session for the routes that still query directly.

    Args:
        items: List of ORM objects for ``.scalars().all()``.
        single: Single ORM object for ``.scalar_one_or_none()``.
        count: Integer for ``.scalar_one()`` (count queries).

    When only ``items`` is provided, count is inferred as ``len(items)``.
    """
    if items is not None and count is None:
        count = len(items)

    session = AsyncMock()

    mock_result = MagicMock()
    mock_result.scalar_one.return_value = count or 0
    mock_result.scalars.return_value.all.return_value = items or []
    mock_result.scalar_one_or_none.return_value = single
    mock_result.rowcount = count or 0

    session.execute = AsyncMock(return_value=mock_result)
    return session


def configure_app_for_persona(
    app,
    persona: Persona,
    db: InMemoryDatabase,
    recorder: EffectRecorder,
    session: AsyncMock | None = None,
) -> None:
    """Override auth, store, dispatcher and DB session on ``app``."""
    mock_session = session or make_mock_session()

    async def fake_user():
        return persona.user

    async def fake_actor():
        return persona.actor

    async def fake_store():
        return InMemoryRecordStore(db)

    async def fake_db():
        yield mock_session

    app.dependency_overrides[get_current_user] = fake_user
    app.dependency_overrides[get_current_actor] = fake_actor
    app.dependency_overrides[get_record_store] = fake_store
    app.dependency_overrides[get_effect_dispatcher] = lambda: recorder
    app.dependency_overrides[get_db] = fake_db
