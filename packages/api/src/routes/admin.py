# This project was developed with assistance from AI tools.
"""Admin endpoints for demo data seeding and audit trail queries."""

from db import get_db
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import ADMIN_ROLES
from ..middleware.auth import require_roles
from ..schemas import Pagination
from ..schemas.admin import (
    AuditChainVerifyResponse,
    AuditEventItem,
    AuditEventsResponse,
    SeedResponse,
    SeedStatusResponse,
)
from ..services.audit import list_audit_events, verify_audit_chain
from ..services.seed.seeder import get_seed_status, seed_demo_data

router = APIRouter(dependencies=[Depends(require_roles(*ADMIN_ROLES))])


@router.post("/seed", response_model=SeedResponse)
async def seed_data(
    force: bool = False,
    session: AsyncSession = Depends(get_db),
) -> SeedResponse:
    """Seed demo data. Pass force=true to insert any missing fixture rows.

    Simulated for demonstration purposes -- not real people or cases.
    """
    result = await seed_demo_data(session, force=force)
    return SeedResponse(**result)


@router.get("/seed/status", response_model=SeedStatusResponse)
async def seed_status(
    session: AsyncSession = Depends(get_db),
) -> SeedStatusResponse:
    """Check if demo data has been seeded."""
    result = await get_seed_status(session)
    return SeedStatusResponse(**result)


@router.get("/audit", response_model=AuditEventsResponse)
async def get_audit_events(
    record_id: int | None = Query(default=None, description="Narrow to one negative record"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    session: AsyncSession = Depends(get_db),
) -> AuditEventsResponse:
    """Audit events newest first."""
    events, total = await list_audit_events(
        session, record_id=record_id, offset=offset, limit=limit
    )
    return AuditEventsResponse(
        data=[AuditEventItem.model_validate(e) for e in events],
        pagination=Pagination.of(total, offset, limit),
    )


@router.get("/audit/verify", response_model=AuditChainVerifyResponse)
async def verify_audit(
    session: AsyncSession = Depends(get_db),
) -> AuditChainVerifyResponse:
    """Verify audit trail hash chain integrity."""
    result = await verify_audit_chain(session)
    return AuditChainVerifyResponse(**result)
