"""
Pydantic schemas for account operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from yield_ledger.models.enums import AccountStatus


class AccountRegister(BaseModel):
    """Signup payload. The account id comes from the X-Account-Id header."""
    email: str = Field(min_length=5, max_length=255)
    full_name: str = Field(min_length=1, max_length=200)
    referral_code: str | None = Field(default=None, max_length=16)


class AccountResponse(BaseModel):
    id: str
    email: str
    full_name: str
    referral_code: str
    referral_count: int
    referred_by_id: str | None
    balance: Decimal
    status: AccountStatus
    created_at: datetime
    last_login_at: datetime | None

    model_config = {"from_attributes": True}


class AccountStatusUpdate(BaseModel):
    """Request to suspend or reactivate an account."""
    new_status: AccountStatus
