# This project was developed with assistance from AI tools.
"""Credit ledger schemas."""

from datetime import datetime
from decimal import Decimal

from db.enums import BillingType, CreditTransactionType
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from . import Pagination


class TopUpRequest(BaseModel):
    client_id: int = Field(validation_alias=AliasChoices("client_id", "clientId"), gt=0)
    amount: Decimal = Field(max_digits=12, decimal_places=2)


class TopUpResponse(BaseModel):
    client_id: int
    amount: Decimal
    credit_balance: Decimal


class ClientCreditResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    billing_type: BillingType
    credit_balance: Decimal
    credit_limit: Decimal | None = None


class CreditTransactionItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    amount: Decimal
    type: CreditTransactionType
    description: str | None = None
    performed_by: int
    created_at: datetime


class CreditTransactionListResponse(BaseModel):
    data: list[CreditTransactionItem]
    pagination: Pagination
