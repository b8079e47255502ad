"""
Pydantic schemas for transaction operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from yield_ledger.models.enums import TransactionKind, TransactionStatus


class CashRequest(BaseModel):
    """A deposit or withdrawal request. Direction comes from the endpoint."""
    amount: Decimal = Field(gt=0, decimal_places=4)


class RejectRequest(BaseModel):
    # Blank reasons are rejected by the service with EmptyReason
    reason: str = Field(default="", max_length=500)


class TransactionResponse(BaseModel):
    id: int
    account_id: str
    kind: TransactionKind
    status: TransactionStatus
    amount: Decimal
    requested_at: datetime
    processed_at: datetime | None
    processed_by: str | None
    rejection_reason: str | None
    investment_id: int | None
    plan_id: str | None

    model_config = {"from_attributes": True}


class AdminTransactionResponse(TransactionResponse):
    """A transaction as the admin console lists it, with its owner."""
    user_email: str
    user_name: str
