# This project was developed with assistance from AI tools.
"""Notification inbox service.

Rows are written by the effect dispatcher after a core operation commits;
the inbox endpoints read and mark them for the owning user only.
"""

import logging

from db import Notification
from db.enums import NotificationType
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def create_notification(
    session: AsyncSession,
    *,
    user_id: int,
    type: NotificationType,
    title: str,
    message: str,
    related_id: int | None = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        related_id=related_id,
    )
    session.add(notification)
    await session.flush()
    return notification


async def list_notifications(
    session: AsyncSession,
    user_id: int,
    *,
    unread_only: bool = False,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Notification], int]:
    """Return the user's notifications, newest first, with the total count."""
    stmt = select(Notification).where(Notification.user_id == user_id)
    count_stmt = select(func.count(Notification.id)).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
        count_stmt = count_stmt.where(Notification.is_read.is_(False))

    total = (await session.execute(count_stmt)).scalar_one()
    result = await session.execute(
        stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def count_unread(session: AsyncSession, user_id: int) -> int:
    stmt = select(func.count(Notification.id)).where(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    )
    return (await session.execute(stmt)).scalar_one()


async def mark_read(
    session: AsyncSession, user_id: int, notification_id: int
) -> Notification | None:
    """Mark one notification read.  Returns None if it is not the user's."""
    stmt = select(Notification).where(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    )
    notification = (await session.execute(stmt)).scalar_one_or_none()
    if notification is None:
        return None
    notification.is_read = True
    await session.commit()
    return notification


async def mark_all_read(session: AsyncSession, user_id: int) -> int:
    stmt = (
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount
