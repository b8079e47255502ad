"""
Pydantic schemas for plans and investments.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

from yield_ledger.models.enums import InvestmentStatus, PayoutStatus
from yield_ledger.services.accrual import remaining_time as time_left


class PlanResponse(BaseModel):
    id: str
    name: str
    description: str
    min_amount: Decimal
    rate: Decimal
    duration_days: int
    recommended: bool

    model_config = {"from_attributes": True}


class InvestmentOpen(BaseModel):
    """Open a position in a catalog plan. Defaults to the plan minimum."""
    plan_id: str = Field(min_length=1, max_length=50)
    amount: Decimal | None = Field(default=None, gt=0, decimal_places=4)


class InvestmentResponse(BaseModel):
    id: int
    account_id: str
    plan_id: str
    principal: Decimal
    rate: Decimal
    duration_days: int
    expected_return: Decimal
    accrued_profit: Decimal
    status: InvestmentStatus
    payout_status: PayoutStatus
    opened_at: datetime
    matures_at: datetime
    last_accrued_at: datetime | None
    processed_at: datetime | None
    processed_by: str | None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def remaining_time(self) -> str:
        if self.status != InvestmentStatus.ACTIVE:
            return self.status.value.capitalize()
        return time_left(self.matures_at, datetime.utcnow())


class AdminInvestmentResponse(InvestmentResponse):
    user_email: str
    user_name: str


class InvestmentStatsResponse(BaseModel):
    total_invested: Decimal
    total_profit: Decimal
    active_investments: int
    roi: float

    model_config = {"from_attributes": True}


class PortfolioResponse(BaseModel):
    investments: list[InvestmentResponse]
    stats: InvestmentStatsResponse


class SweepResponse(BaseModel):
    examined: int
    accrued: int
    completed: int
    failed: int

    model_config = {"from_attributes": True}
