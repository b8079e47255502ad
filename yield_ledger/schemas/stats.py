"""
Pydantic schemas for platform reporting.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class WeeklyStatResponse(BaseModel):
    current_week: Decimal
    previous_week: Decimal
    percentage_change: str

    model_config = {"from_attributes": True}


class RecentTransactionResponse(BaseModel):
    id: int
    account_id: str
    user_email: str
    user_name: str
    kind: str
    status: str
    amount: Decimal
    requested_at: datetime

    model_config = {"from_attributes": True}


class PlatformStatsResponse(BaseModel):
    total_platform_value: Decimal
    users: WeeklyStatResponse
    deposits: WeeklyStatResponse
    investments: WeeklyStatResponse
    withdrawals: WeeklyStatResponse
    recent_transactions: list[RecentTransactionResponse]
