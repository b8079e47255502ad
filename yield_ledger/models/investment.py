"""
Investment model.

A fixed-term position against a yield plan. The principal is
debited when the position opens. The payout (principal plus the
full return) is credited once, either by the accrual engine at
maturity or by an admin forcing an early payout.

status tracks the lifecycle; payout_status tracks the money
movement. Once payout_status is COMPLETED no further balance
mutation may happen for this investment.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Integer, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yield_ledger.models.base import Base
from yield_ledger.models.enums import InvestmentStatus, PayoutStatus


def expected_return_for(principal: Decimal, rate: Decimal) -> Decimal:
    """principal + principal * rate / 100"""
    return principal + principal * rate / Decimal(100)


class Investment(Base):
    __tablename__ = "investments"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[str] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    plan_id: Mapped[str] = mapped_column(String(50), nullable=False)
    principal: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    rate: Mapped[Decimal] = mapped_column(
        Numeric(9, 4), nullable=False
    )
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    expected_return: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    accrued_profit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    status: Mapped[InvestmentStatus] = mapped_column(
        SAEnum(
            InvestmentStatus,
            name="investment_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=InvestmentStatus.ACTIVE,
        index=True,
    )
    payout_status: Mapped[PayoutStatus] = mapped_column(
        SAEnum(
            PayoutStatus,
            name="payout_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=PayoutStatus.PENDING,
    )
    opened_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    matures_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_accrued_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    # None when the accrual engine settled the investment
    processed_by: Mapped[str | None] = mapped_column(
        String(128), nullable=True
    )

    account: Mapped["Account"] = relationship(back_populates="investments")

    @property
    def max_profit(self) -> Decimal:
        return self.expected_return - self.principal

    @property
    def user_email(self) -> str:
        return self.account.email

    @property
    def user_name(self) -> str:
        return self.account.full_name

    def __repr__(self) -> str:
        return (
            f"<Investment {self.plan_id} {self.principal} "
            f"({self.status.value}/{self.payout_status.value})>"
        )
