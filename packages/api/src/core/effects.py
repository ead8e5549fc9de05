# This project was developed with assistance from AI tools.
"""Outbound effects returned by core operations.

Core operations never call the notification or audit sinks themselves.
They return these values and the calling shell performs them after the
core transaction has committed.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from db.enums import NotificationType

T = TypeVar("T")


@dataclass(frozen=True)
class NotificationEffect:
    user_id: int
    type: NotificationType
    title: str
    message: str
    related_id: int | None = None


@dataclass(frozen=True)
class AuditEffect:
    user_id: int | None
    action: str
    module: str
    record_id: int | None = None
    details: dict = field(default_factory=dict)


Effect = NotificationEffect | AuditEffect


@dataclass
class Outcome(Generic[T]):
    """A core result paired with the effects the shell must perform."""

    value: T
    effects: list[Effect] = field(default_factory=list)
