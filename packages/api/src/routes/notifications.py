# This project was developed with assistance from AI tools.
"""Notification inbox endpoints."""

from db import get_db
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import ALL_ROLES
from ..middleware.auth import CurrentActor, require_roles
from ..schemas import Pagination
from ..schemas.notification import (
    MarkAllReadResponse,
    NotificationItem,
    NotificationListResponse,
    UnreadCountResponse,
)
from ..services import notification as notification_service

router = APIRouter(dependencies=[Depends(require_roles(*ALL_ROLES))])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    actor: CurrentActor,
    session: AsyncSession = Depends(get_db),
    unread_only: bool = False,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> NotificationListResponse:
    """The caller's notifications, newest first."""
    items, total = await notification_service.list_notifications(
        session, actor.user_id, unread_only=unread_only, offset=offset, limit=limit
    )
    return NotificationListResponse(
        data=[NotificationItem.model_validate(n) for n in items],
        pagination=Pagination.of(total, offset, limit),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    actor: CurrentActor,
    session: AsyncSession = Depends(get_db),
) -> UnreadCountResponse:
    count = await notification_service.count_unread(session, actor.user_id)
    return UnreadCountResponse(count=count)


@router.patch("/read-all", response_model=MarkAllReadResponse)
async def read_all(
    actor: CurrentActor,
    session: AsyncSession = Depends(get_db),
) -> MarkAllReadResponse:
    updated = await notification_service.mark_all_read(session, actor.user_id)
    return MarkAllReadResponse(updated=updated)


@router.patch("/{notification_id}/read", response_model=NotificationItem)
async def read_one(
    notification_id: int,
    actor: CurrentActor,
    session: AsyncSession = Depends(get_db),
) -> NotificationItem:
    notification = await notification_service.mark_read(session, actor.user_id, notification_id)
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
    return NotificationItem.model_validate(notification)
