# This project was developed with assistance from AI tools.
"""Notification inbox schemas."""

from datetime import datetime

from db.enums import NotificationType
from pydantic import BaseModel, ConfigDict

from . import Pagination


class NotificationItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: NotificationType
    title: str
    message: str
    related_id: int | None = None
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    data: list[NotificationItem]
    pagination: Pagination


class UnreadCountResponse(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int
