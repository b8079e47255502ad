"""
Daily reporting counter.

One row per (day, metric). The reporting event sink increments
these rows inside the same database transaction as the mutation
that produced the event, so platform totals and weekly figures
are read from a handful of rows instead of scanning every
account's transactions.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    Date, Integer, Numeric, UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from yield_ledger.models.base import Base
from yield_ledger.models.enums import StatMetric


class DailyStat(Base):
    __tablename__ = "daily_stats"
    __table_args__ = (
        UniqueConstraint("day", "metric", name="uq_daily_stats_day_metric"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    metric: Mapped[StatMetric] = mapped_column(
        SAEnum(StatMetric, name="stat_metric_enum", create_constraint=True),
        nullable=False,
    )
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )

    def __repr__(self) -> str:
        return f"<DailyStat {self.day} {self.metric.value} {self.count}/{self.amount}>"
