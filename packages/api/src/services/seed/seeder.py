# This project was developed with assistance from AI tools.
"""Demo data seeding service.

Seeds clients, their users, and a handful of negative records so every
role has something to explore immediately after deployment.  Locks are not
seeded: the first affiliate search claims records as it would in production.

Lock history and audit events are append-only, so re-seeding never deletes
rows; ``force`` inserts whatever fixture rows are missing and writes a fresh
manifest.

Simulated for demonstration purposes -- not real people or cases.
"""

import json
import logging
from datetime import UTC, datetime

from db import Client, DemoDataManifest, NegativeRecord, User
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..audit import write_audit_event
from .fixtures import CLIENTS, RECORDS, USERS, compute_config_hash

logger = logging.getLogger(__name__)


async def _check_manifest(session: AsyncSession) -> DemoDataManifest | None:
    """Check if demo data has been seeded."""
    result = await session.execute(
        select(DemoDataManifest).order_by(DemoDataManifest.id.desc()).limit(1)
    )
    return result.scalar_one_or_none()


async def _seed_clients(session: AsyncSession) -> tuple[dict[str, int], int]:
    """Insert missing clients; return client_code -> id and the number created."""
    codes = [c["client_code"] for c in CLIENTS]
    result = await session.execute(select(Client).where(Client.client_code.in_(codes)))
    existing = {c.client_code: c for c in result.scalars().all()}

    created = 0
    for c_data in CLIENTS:
        if c_data["client_code"] in existing:
            continue
        client = Client(**c_data)
        session.add(client)
        existing[c_data["client_code"]] = client
        created += 1

    await session.flush()  # Get client IDs
    return {code: client.id for code, client in existing.items()}, created


async def _seed_users(session: AsyncSession, client_map: dict[str, int]) -> int:
    known_ids = [u["keycloak_user_id"] for u in USERS]
    result = await session.execute(
        select(User.keycloak_user_id).where(User.keycloak_user_id.in_(known_ids))
    )
    existing = set(result.scalars().all())

    created = 0
    for u_data in USERS:
        if u_data["keycloak_user_id"] in existing:
            continue
        fields = {k: v for k, v in u_data.items() if k != "client_ref"}
        client_ref = u_data["client_ref"]
        session.add(
            User(
                **fields,
                client_id=client_map[client_ref] if client_ref else None,
                is_approved=True,
            )
        )
        created += 1

    await session.flush()
    return created


async def _seed_records(session: AsyncSession) -> int:
    created = 0
    for r_data in RECORDS:
        stmt = select(NegativeRecord.id).where(NegativeRecord.type == r_data["type"])
        if r_data.get("case_no"):
            stmt = stmt.where(NegativeRecord.case_no == r_data["case_no"])
        elif r_data.get("company_name"):
            stmt = stmt.where(NegativeRecord.company_name == r_data["company_name"])
        else:
            stmt = stmt.where(
                NegativeRecord.first_name == r_data.get("first_name"),
                NegativeRecord.last_name == r_data.get("last_name"),
            )
        if (await session.execute(stmt.limit(1))).scalar_one_or_none() is not None:
            continue
        session.add(NegativeRecord(**r_data))
        created += 1

    await session.flush()
    return created


async def seed_demo_data(session: AsyncSession, force: bool = False) -> dict:
    """Seed demo data. Returns summary dict.

    Args:
        session: Database session.
        force: If True, re-run seeding even if a manifest exists.

    Returns:
        Summary dict with counts of newly created rows.
    """
    manifest = await _check_manifest(session)
    if manifest and not force:
        return {
            "status": "already_seeded",
            "seeded_at": manifest.seeded_at.isoformat(),
            "config_hash": manifest.config_hash,
        }

    if manifest and force:
        await session.execute(delete(DemoDataManifest))

    client_map, clients_created = await _seed_clients(session)
    users_created = await _seed_users(session, client_map)
    records_created = await _seed_records(session)

    config_hash = compute_config_hash()
    summary = {
        "clients": clients_created,
        "users": users_created,
        "records": records_created,
    }
    session.add(DemoDataManifest(config_hash=config_hash, summary=json.dumps(summary)))

    await write_audit_event(
        session,
        action="DEMO_DATA_SEEDED",
        module="demo_data_manifest",
        event_data=summary,
    )
    await session.commit()

    logger.info("Demo data seeded: %s", summary)

    return {
        "status": "seeded",
        "seeded_at": datetime.now(UTC).isoformat(),
        "config_hash": config_hash,
        **summary,
    }


async def get_seed_status(session: AsyncSession) -> dict:
    """Check if demo data has been seeded."""
    manifest = await _check_manifest(session)
    if manifest is None:
        return {"seeded": False}
    return {
        "seeded": True,
        "seeded_at": manifest.seeded_at.isoformat(),
        "config_hash": manifest.config_hash,
        "summary": json.loads(manifest.summary) if manifest.summary else None,
    }
