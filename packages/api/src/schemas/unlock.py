# This project was developed with assistance from AI tools.
"""Unlock request schemas."""

from datetime import datetime

from db.enums import UnlockRequestStatus
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from . import Pagination


class UnlockRequestCreate(BaseModel):
    record_id: int = Field(validation_alias=AliasChoices("record_id", "recordId"), gt=0)
    reason: str | None = Field(default=None, max_length=2000)


class UnlockRequestReview(BaseModel):
    """Reviewer decision.  ``denial_reason`` is required when denying."""

    status: str
    denial_reason: str | None = Field(
        default=None,
        max_length=2000,
        validation_alias=AliasChoices("denial_reason", "denialReason"),
    )


class UnlockRequestItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    requested_by: int
    record_id: int
    status: UnlockRequestStatus
    reason: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    denial_reason: str | None = None
    created_at: datetime | None = None


class UnlockRequestListResponse(BaseModel):
    data: list[UnlockRequestItem]
    pagination: Pagination
