# This project was developed with assistance from AI tools.
"""Billing gate: lock-gated printing and the client credit ledger.

Only the current lock holder may print.  Prepaid clients pay ``fee`` per
print through a single conditional decrement, so concurrent prints can never
spend more than the balance.  Postpaid clients print without deduction.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from db.enums import BillingType, CreditTransactionType

from .arbitration import require_active_client
from .auth import is_admin
from .effects import AuditEffect, Outcome
from .errors import Forbidden, InvalidInput, NotFound, PaymentRequired
from .ports import (
    Actor,
    ClientAccount,
    CreditTransactionData,
    NegativeRecordData,
    RecordStore,
)

logger = logging.getLogger(__name__)

DEFAULT_PRINT_FEE = Decimal("1.00")


@dataclass(frozen=True)
class PrintResult:
    record: NegativeRecordData
    printed_by: int
    printed_at: datetime
    billed: bool
    fee: Decimal
    remaining_credit: Decimal

    @property
    def print_meta(self) -> dict:
        return {
            "record_id": self.record.id,
            "printed_by": self.printed_by,
            "printed_at": self.printed_at.isoformat(),
        }


@dataclass(frozen=True)
class TopUpResult:
    client_id: int
    amount: Decimal
    credit_balance: Decimal


async def print_record(
    store: RecordStore,
    actor: Actor,
    record_id: int,
    *,
    fee: Decimal = DEFAULT_PRINT_FEE,
) -> Outcome[PrintResult]:
    """Authorize and bill one print of ``record_id``.

    The deduction and its ledger row commit before the caller renders the
    artifact.  Holding the record guard means a concurrent lock transfer
    cannot slip between the holder check and the deduction.
    """
    client = await require_active_client(store, actor)

    async with store.atomic():
        record = await store.get_record(record_id, for_update=True)
        if record is None:
            raise NotFound("Record not found")
        lock = await store.get_lock(record_id)
        if lock is None or lock.locked_by != actor.user_id:
            logger.warning(
                "Print denied: user=%s does not hold record=%s", actor.user_id, record_id
            )
            raise Forbidden("Only the current lock holder can print this record")

        billed = False
        remaining = client.credit_balance
        if client.billing_type == BillingType.PREPAID:
            remaining = await store.deduct_credit(client.id, fee)
            if remaining is None:
                logger.warning(
                    "Print refused for insufficient credit: client=%s fee=%s", client.id, fee
                )
                raise PaymentRequired(
                    "Insufficient credit. Please request a top-up from your admin."
                )
            await store.add_credit_transaction(
                client.id,
                fee,
                CreditTransactionType.DEDUCTION,
                f"Print: record #{record_id}",
                actor.user_id,
            )
            billed = True
            logger.info(
                "Credit deducted: client=%s fee=%s remaining=%s", client.id, fee, remaining
            )

    result = PrintResult(
        record=record,
        printed_by=actor.user_id,
        printed_at=datetime.now(UTC),
        billed=billed,
        fee=fee if billed else Decimal("0"),
        remaining_credit=remaining,
    )
    audit = AuditEffect(
        user_id=actor.user_id,
        action="RECORD_PRINT",
        module="negative_records",
        record_id=record_id,
        details={"billed": billed, "fee": str(result.fee)},
    )
    return Outcome(result, [audit])


async def top_up_credit(
    store: RecordStore,
    actor: Actor,
    client_id: int,
    amount: Decimal,
) -> Outcome[TopUpResult]:
    """Add ``amount`` to a client's balance with a matching ledger row."""
    if not is_admin(actor.role):
        raise Forbidden("Only admins can top up credit")
    if amount is None or amount <= 0:
        raise InvalidInput("Amount must be greater than zero")

    async with store.atomic():
        client = await store.get_client(client_id)
        if client is None or not client.is_active:
            raise NotFound("Client not found")
        await store.add_credit_transaction(
            client_id,
            amount,
            CreditTransactionType.TOPUP,
            f"Credit top-up of {amount}",
            actor.user_id,
        )
        balance = await store.add_credit(client_id, amount)
        if balance is None:
            raise NotFound("Client not found")

    logger.info("Credit topped up: client=%s amount=%s balance=%s", client_id, amount, balance)
    audit = AuditEffect(
        user_id=actor.user_id,
        action="CREDIT_TOPUP",
        module="credit_transactions",
        details={"client_id": client_id, "amount": str(amount)},
    )
    return Outcome(TopUpResult(client_id, amount, balance), [audit])


def _can_view_client(actor: Actor, client_id: int) -> bool:
    return is_admin(actor.role) or actor.client_id == client_id


async def get_client_credit(
    store: RecordStore, actor: Actor, client_id: int
) -> ClientAccount:
    if not _can_view_client(actor, client_id):
        raise Forbidden("You cannot view this client's credit")
    client = await store.get_client(client_id)
    if client is None:
        raise NotFound("Client not found")
    return client


async def list_credit_transactions(
    store: RecordStore,
    actor: Actor,
    client_id: int,
    *,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[CreditTransactionData], int]:
    await get_client_credit(store, actor, client_id)
    return await store.list_credit_transactions(client_id, offset, limit)
