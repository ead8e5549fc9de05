# This project was developed with assistance from AI tools.
"""Admin-side record operations: creation and lock-history reads."""

import logging

from db.enums import RecordType

from .auth import is_admin
from .effects import AuditEffect, Outcome
from .errors import Forbidden, InvalidInput, NotFound
from .ports import Actor, LockHistoryEntry, NegativeRecordData, RecordStore

logger = logging.getLogger(__name__)


async def create_record(
    store: RecordStore, actor: Actor, fields: dict
) -> Outcome[NegativeRecordData]:
    if not is_admin(actor.role):
        raise Forbidden("Only admins can create records")
    record_type = fields.get("type")
    if record_type == RecordType.COMPANY and not fields.get("company_name"):
        raise InvalidInput("company_name is required for Company records")
    if record_type == RecordType.INDIVIDUAL and not any(
        fields.get(k) for k in ("first_name", "middle_name", "last_name")
    ):
        raise InvalidInput("At least one name field is required for Individual records")

    async with store.atomic():
        record = await store.create_record(fields)

    logger.info("Record created: id=%s type=%s by=%s", record.id, record.type, actor.user_id)
    return Outcome(
        record,
        [
            AuditEffect(
                user_id=actor.user_id,
                action="RECORD_CREATE",
                module="negative_records",
                record_id=record.id,
            )
        ],
    )


async def get_lock_history(
    store: RecordStore, actor: Actor, record_id: int
) -> list[LockHistoryEntry]:
    if not is_admin(actor.role):
        raise Forbidden("Only admins can view lock history")
    if await store.get_record(record_id) is None:
        raise NotFound("Record not found")
    return await store.list_lock_history(record_id)
