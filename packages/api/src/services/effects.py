# This project was developed with assistance from AI tools.
"""Post-commit effect dispatch.

Routes commit the core transaction, then hand the returned effects to an
``EffectDispatcher`` which FastAPI runs as a background task.  Each effect
is written in its own session and transaction; one failure is logged and
does not stop the rest.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Annotated

from db.database import SessionLocal
from fastapi import BackgroundTasks, Depends

from ..core.effects import AuditEffect, Effect, NotificationEffect
from .audit import write_audit_event
from .notification import create_notification

logger = logging.getLogger(__name__)


async def _apply(session, effect: Effect) -> None:
    if isinstance(effect, NotificationEffect):
        await create_notification(
            session,
            user_id=effect.user_id,
            type=effect.type,
            title=effect.title,
            message=effect.message,
            related_id=effect.related_id,
        )
    elif isinstance(effect, AuditEffect):
        await write_audit_event(
            session,
            action=effect.action,
            module=effect.module,
            user_id=effect.user_id,
            record_id=effect.record_id,
            event_data=effect.details or None,
        )
    else:
        raise TypeError(f"Unknown effect: {effect!r}")


async def dispatch_effects(
    effects: Sequence[Effect], session_factory: Callable | None = None
) -> int:
    """Write every effect; return how many succeeded."""
    factory = session_factory or SessionLocal
    applied = 0
    for effect in effects:
        try:
            async with factory() as session:
                await _apply(session, effect)
                await session.commit()
            applied += 1
        except Exception:
            logger.exception("Failed to apply effect %s", type(effect).__name__)
    return applied


class EffectDispatcher:
    """Schedules effects on the response's background tasks."""

    def __init__(self, background_tasks: BackgroundTasks):
        self._background_tasks = background_tasks

    def __call__(self, effects: Sequence[Effect]) -> None:
        if effects:
            self._background_tasks.add_task(dispatch_effects, list(effects))


def get_effect_dispatcher(background_tasks: BackgroundTasks) -> EffectDispatcher:
    """FastAPI dependency: dispatcher bound to this request's background tasks."""
    return EffectDispatcher(background_tasks)


Dispatcher = Annotated[EffectDispatcher, Depends(get_effect_dispatcher)]
