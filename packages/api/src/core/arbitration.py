# This project was developed with assistance from AI tools.
"""Access arbitration: claim-or-view search, lock info, unlock requests.

A record has zero or one lock.  The first affiliate whose search matches an
unlocked record claims it; everybody else sees a redacted view and may file
an unlock request.  An admin or the current holder reviews the request, and
approval transfers the lock and cascade-denies every competing request.

All functions take a ``RecordStore`` and return an ``Outcome`` whose effects
(notifications, audit appends) the caller performs after commit.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal

from db.enums import LockAction, NotificationType, RecordType, UnlockRequestStatus

from .auth import is_admin, is_affiliate
from .effects import AuditEffect, Effect, NotificationEffect, Outcome
from .errors import Conflict, Forbidden, InvalidInput, InvalidState, NotFound
from .ports import (
    Actor,
    ClientAccount,
    LockState,
    NegativeRecordData,
    RecordCriteria,
    RecordStore,
    SearchLogEntry,
    UnlockRequestData,
    UserProfile,
)

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 50
ACCESS_HISTORY_LIMIT = 100

# Withheld from anyone who does not hold the record's lock.
SENSITIVE_FIELDS = ("details", "source")


@dataclass(frozen=True)
class RecordView:
    """One search hit as seen by the searcher."""

    record: NegativeRecordData
    is_locked: bool
    is_owner: bool
    has_pending_request: bool = False
    locked_by_name: str | None = None
    locked_by_affiliate: str | None = None
    locked_at: datetime | None = None


@dataclass(frozen=True)
class SearchResult:
    results: list[RecordView]
    remaining_credit: Decimal
    search_term: str
    billed: bool = False


@dataclass(frozen=True)
class LockInfo:
    record_id: int
    locked_at: datetime
    owner: UserProfile
    access_history: list[SearchLogEntry] = field(default_factory=list)


def mask_name(name: str | None) -> str | None:
    """Obfuscate a person's name for redacted views: ``Juan Cruz`` -> ``J*** C***``."""
    if not name:
        return name
    return " ".join(f"{word[0]}***" for word in name.split())


# ---------------------------------------------------------------------------
# Shared guards
# ---------------------------------------------------------------------------


async def require_active_client(store: RecordStore, actor: Actor) -> ClientAccount:
    """The caller must belong to an active client to search or print."""
    if actor.client_id is None:
        raise Forbidden("No client assigned to this user")
    client = await store.get_client(actor.client_id)
    if client is None or not client.is_active:
        raise Forbidden("Client account is inactive")
    return client


def _validate_criteria(criteria: RecordCriteria) -> None:
    if criteria.type == RecordType.INDIVIDUAL:
        if not criteria.has_name() and not (criteria.term and criteria.term.strip()):
            raise InvalidInput("At least one of first_name, middle_name or last_name is required")
        return
    if not (criteria.term and criteria.term.strip()):
        raise InvalidInput("Company name is required")


# ---------------------------------------------------------------------------
# Claim-or-view search
# ---------------------------------------------------------------------------


async def claim_or_view(
    store: RecordStore,
    actor: Actor,
    criteria: RecordCriteria,
    *,
    result_limit: int = SEARCH_RESULT_LIMIT,
) -> Outcome[SearchResult]:
    """Search records; claim each unlocked hit for the caller.

    Lock creation is an insert-if-absent against the unique lock row, so a
    searcher that loses a race sees the winner's lock rather than a
    duplicate.  The search itself is free; only printing bills credit.
    """
    _validate_criteria(criteria)
    client = await require_active_client(store, actor)
    search_term = criteria.normalized()
    effects: list[Effect] = []

    async with store.atomic():
        records = await store.find_records(criteria, result_limit)
        record_ids = [r.id for r in records]
        locks = await store.get_locks(record_ids)

        for record in records:
            if record.id in locks:
                continue
            claimed = await store.insert_lock_if_absent(record.id, actor.user_id)
            if claimed is None:
                # Lost the race: someone else created it between our reads.
                current = await store.get_lock(record.id)
                if current is not None:
                    locks[record.id] = current
                logger.warning(
                    "Lock race lost: record=%s user=%s", record.id, actor.user_id
                )
                continue
            locks[record.id] = claimed
            await store.append_lock_history(record.id, actor.user_id, LockAction.LOCK_CREATED)
            logger.info("Lock created: record=%s user=%s", record.id, actor.user_id)
            effects.append(
                AuditEffect(
                    user_id=actor.user_id,
                    action="LOCK_CREATED",
                    module="record_locks",
                    record_id=record.id,
                )
            )

        pending = await store.pending_request_record_ids(actor.user_id, record_ids)
        await store.add_search_log(
            actor.user_id,
            client.id,
            criteria.type,
            search_term,
            False,
            Decimal("0"),
        )

        views = [
            await _view_for(store, actor, record, locks.get(record.id), pending)
            for record in records
        ]

    return Outcome(
        SearchResult(
            results=views,
            remaining_credit=client.credit_balance,
            search_term=search_term,
        ),
        effects,
    )


async def _view_for(
    store: RecordStore,
    actor: Actor,
    record: NegativeRecordData,
    lock: LockState | None,
    pending: set[int],
) -> RecordView:
    if lock is None or lock.locked_by == actor.user_id:
        return RecordView(record=record, is_locked=False, is_owner=lock is not None)

    owner = await store.get_user(lock.locked_by)
    return RecordView(
        record=redact(record),
        is_locked=True,
        is_owner=False,
        has_pending_request=record.id in pending,
        locked_by_name=mask_name(owner.full_name) if owner else None,
        locked_by_affiliate=owner.client_name if owner else None,
        locked_at=lock.locked_at,
    )


def redact(record: NegativeRecordData) -> NegativeRecordData:
    return replace(record, **{name: None for name in SENSITIVE_FIELDS})


# ---------------------------------------------------------------------------
# Lock info
# ---------------------------------------------------------------------------


async def get_lock_info(
    store: RecordStore,
    actor: Actor,
    record_id: int,
    *,
    history_limit: int = ACCESS_HISTORY_LIMIT,
) -> LockInfo:
    """Owner contact profile plus access history for a locked record.

    Access history matches search logs whose normalized term equals the
    record's own normalized name, not by record id, so records that
    normalize to the same string share history.  Affiliates need an active
    client, as for search; admins may look up any record.  The holder gets
    their own profile back.
    """
    if is_affiliate(actor.role):
        await require_active_client(store, actor)
    record = await store.get_record(record_id)
    if record is None:
        raise NotFound("Record not found")
    lock = await store.get_lock(record_id)
    if lock is None:
        raise NotFound("Record is not locked")
    owner = await store.get_user(lock.locked_by)
    if owner is None:
        raise NotFound("Lock owner not found")

    history = await store.list_search_logs_by_term(record.normalized_name, history_limit)
    return LockInfo(
        record_id=record_id,
        locked_at=lock.locked_at,
        owner=owner,
        access_history=history,
    )


# ---------------------------------------------------------------------------
# Unlock requests
# ---------------------------------------------------------------------------


async def create_unlock_request(
    store: RecordStore,
    actor: Actor,
    record_id: int,
    reason: str | None = None,
) -> Outcome[UnlockRequestData]:
    """File a pending request to take over ``record_id``'s lock."""
    if actor.client_id is None:
        raise Forbidden("No client assigned to this user")
    reason = reason.strip() if reason and reason.strip() else None

    async with store.atomic():
        record = await store.get_record(record_id)
        if record is None:
            raise NotFound("Record not found")

        if await store.find_pending_request(actor.user_id, record_id) is not None:
            raise Conflict("You already have a pending request for this record")
        request = await store.insert_pending_request(actor.user_id, record_id, reason)
        if request is None:
            logger.warning(
                "Duplicate pending request rejected by store: record=%s user=%s",
                record_id,
                actor.user_id,
            )
            raise Conflict("You already have a pending request for this record")

        lock = await store.get_lock(record_id)
        admin_ids = await store.list_admin_user_ids()

    logger.info(
        "Unlock request created: id=%s record=%s user=%s", request.id, record_id, actor.user_id
    )

    label = _record_label(record)
    effects: list[Effect] = [
        NotificationEffect(
            user_id=actor.user_id,
            type=NotificationType.UNLOCK_REQUEST_SUBMITTED,
            title="Unlock request submitted",
            message=f"Your unlock request for {label} has been submitted and is pending review.",
            related_id=request.id,
        )
    ]
    notified = {actor.user_id}
    if lock is not None and lock.locked_by != actor.user_id:
        effects.append(
            NotificationEffect(
                user_id=lock.locked_by,
                type=NotificationType.UNLOCK_REQUEST_RECEIVED,
                title="New unlock request",
                message=f"Another affiliate has requested access to {label}, which you hold.",
                related_id=request.id,
            )
        )
        notified.add(lock.locked_by)
    for admin_id in admin_ids:
        if admin_id in notified:
            continue
        notified.add(admin_id)
        effects.append(
            NotificationEffect(
                user_id=admin_id,
                type=NotificationType.UNLOCK_REQUEST_RECEIVED,
                title="New unlock request",
                message=f"An unlock request for {label} is awaiting review.",
                related_id=request.id,
            )
        )
    effects.append(
        AuditEffect(
            user_id=actor.user_id,
            action="UNLOCK_REQUEST_CREATE",
            module="unlock_requests",
            record_id=record_id,
            details={"request_id": request.id},
        )
    )
    return Outcome(request, effects)


async def review_unlock_request(
    store: RecordStore,
    actor: Actor,
    request_id: int,
    decision: UnlockRequestStatus | str,
    denial_reason: str | None = None,
) -> Outcome[UnlockRequestData]:
    """Approve or deny a pending request.

    The record row is guarded for the duration, so two reviews (or a review
    and a print) of the same record serialize.  The pending check is a
    conditional update: a concurrent second reviewer gets ``InvalidState``.
    """
    try:
        decision = UnlockRequestStatus(decision)
    except ValueError:
        raise InvalidInput("Status must be 'approved' or 'denied'") from None
    if decision not in UnlockRequestStatus.review_outcomes():
        raise InvalidInput("Status must be 'approved' or 'denied'")
    denial_reason = denial_reason.strip() if denial_reason else None
    if decision == UnlockRequestStatus.DENIED and not denial_reason:
        raise InvalidInput("denialReason is required when denying a request")
    if decision == UnlockRequestStatus.APPROVED:
        denial_reason = None

    request = await store.get_request(request_id)
    if request is None:
        raise NotFound("Request not found")
    if request.requested_by == actor.user_id and not is_admin(actor.role):
        logger.warning(
            "Review denied: user=%s tried to review own request=%s", actor.user_id, request_id
        )
        raise Forbidden("You cannot review your own unlock request")

    cascaded: list[UnlockRequestData] = []
    async with store.atomic():
        record = await store.get_record(request.record_id, for_update=True)
        if record is None:
            raise NotFound("Record not found")
        lock = await store.get_lock(request.record_id)
        holds_lock = lock is not None and lock.locked_by == actor.user_id
        if not (is_admin(actor.role) or holds_lock):
            logger.warning(
                "Review denied: user=%s is neither admin nor holder of record=%s",
                actor.user_id,
                request.record_id,
            )
            raise Forbidden("Only an admin or the current lock holder can review this request")

        reviewed = await store.resolve_pending_request(
            request_id, decision, actor.user_id, denial_reason
        )
        if reviewed is None:
            raise InvalidState("Request already reviewed")

        already_holds = lock is not None and lock.locked_by == reviewed.requested_by
        if decision == UnlockRequestStatus.APPROVED and not already_holds:
            await _grant_lock(store, reviewed.record_id, reviewed.requested_by, lock)
            cascaded = await store.deny_other_pending(
                reviewed.record_id, reviewed.id, actor.user_id
            )

    logger.info(
        "Unlock request %s: id=%s record=%s reviewer=%s cascaded=%d",
        decision.value,
        reviewed.id,
        reviewed.record_id,
        actor.user_id,
        len(cascaded),
    )
    return Outcome(reviewed, _review_effects(actor, record, reviewed, cascaded))


async def _grant_lock(
    store: RecordStore, record_id: int, new_holder: int, current: LockState | None
) -> None:
    if current is not None:
        await store.transfer_lock(record_id, new_holder)
        await store.append_lock_history(record_id, new_holder, LockAction.LOCK_TRANSFERRED)
        logger.info(
            "Lock transferred: record=%s from=%s to=%s", record_id, current.locked_by, new_holder
        )
        return
    # Record was never claimed; approval claims it for the requester.
    if await store.insert_lock_if_absent(record_id, new_holder) is None:
        await store.transfer_lock(record_id, new_holder)
        await store.append_lock_history(record_id, new_holder, LockAction.LOCK_TRANSFERRED)
        return
    await store.append_lock_history(record_id, new_holder, LockAction.LOCK_CREATED)


def _review_effects(
    actor: Actor,
    record: NegativeRecordData,
    reviewed: UnlockRequestData,
    cascaded: list[UnlockRequestData],
) -> list[Effect]:
    label = _record_label(record)
    if reviewed.status == UnlockRequestStatus.APPROVED:
        notification = NotificationEffect(
            user_id=reviewed.requested_by,
            type=NotificationType.UNLOCK_REQUEST_APPROVED,
            title="Unlock request approved",
            message=f"Your unlock request for {label} was approved. You now hold the record.",
            related_id=reviewed.id,
        )
    else:
        notification = NotificationEffect(
            user_id=reviewed.requested_by,
            type=NotificationType.UNLOCK_REQUEST_DENIED,
            title="Unlock request denied",
            message=f"Your unlock request for {label} was denied. Reason: {reviewed.denial_reason}",
            related_id=reviewed.id,
        )
    return [
        notification,
        AuditEffect(
            user_id=actor.user_id,
            action=f"UNLOCK_REQUEST_{reviewed.status.value.upper()}",
            module="unlock_requests",
            record_id=reviewed.record_id,
            details={
                "request_id": reviewed.id,
                "requested_by": reviewed.requested_by,
                "cascade_denied": [r.id for r in cascaded],
            },
        ),
    ]


async def get_unlock_request(
    store: RecordStore, actor: Actor, request_id: int
) -> UnlockRequestData:
    """Visible to admins, the requester, and the record's current holder."""
    request = await store.get_request(request_id)
    if request is None:
        raise NotFound("Request not found")
    if is_admin(actor.role) or request.requested_by == actor.user_id:
        return request
    lock = await store.get_lock(request.record_id)
    if lock is not None and lock.locked_by == actor.user_id:
        return request
    raise Forbidden("You cannot view this request")


async def list_unlock_requests(
    store: RecordStore,
    actor: Actor,
    *,
    scope: str,
    status: UnlockRequestStatus | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[UnlockRequestData], int]:
    """List requests by scope: ``my`` (filed by me), ``owned`` (on records I hold), ``all``."""
    if scope == "my":
        return await store.list_requests(
            requested_by=actor.user_id, status=status, offset=offset, limit=limit
        )
    if scope == "owned":
        return await store.list_requests(
            held_by=actor.user_id, status=status, offset=offset, limit=limit
        )
    if scope == "all":
        if not is_admin(actor.role):
            raise Forbidden("Only admins can list all unlock requests")
        return await store.list_requests(status=status, offset=offset, limit=limit)
    raise InvalidInput(f"Unknown scope: {scope}")


def _record_label(record: NegativeRecordData) -> str:
    if record.type == RecordType.COMPANY:
        name = record.company_name or ""
    else:
        name = " ".join(p for p in (record.first_name, record.last_name) if p)
    return f"record #{record.id} ({name})" if name else f"record #{record.id}"
