"""
Stats service — platform reporting.

Two halves:

- handle() consumes domain events and bumps the per-day counters
  in daily_stats. It runs inside the publishing operation's
  database transaction.
- The query methods read those counters (and the transaction
  table for the recent feed). Reporting is best-effort: a failed
  read is logged and returns zeroed results instead of raising.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from yield_ledger.events import (
    LedgerEvent,
    AccountRegistered,
    DepositApproved,
    WithdrawalApproved,
    TransactionRejected,
    InvestmentOpened,
    InvestmentPaidOut,
    InvestmentCancelled,
    AccountStatusChanged,
)
from yield_ledger.models.account import Account
from yield_ledger.models.daily_stat import DailyStat
from yield_ledger.models.enums import StatMetric
from yield_ledger.models.transaction import Transaction

logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)


@dataclass(frozen=True)
class WeeklyStat:
    current_week: Decimal
    previous_week: Decimal
    percentage_change: str


@dataclass(frozen=True)
class RecentTransaction:
    id: int
    account_id: str
    user_email: str
    user_name: str
    kind: str
    status: str
    amount: Decimal
    requested_at: datetime


ZERO_WEEK = WeeklyStat(Decimal("0"), Decimal("0"), "0")


def percentage_change(current: Decimal, previous: Decimal) -> str:
    """Signed whole-percent change, e.g. "+25", "-10", "0"."""
    if previous == 0:
        return "+100" if current > 0 else "0"
    change = round((current - previous) / previous * 100)
    return f"+{change}" if change > 0 else str(change)


class StatsService:

    def __init__(self, db: Session):
        self.db = db

    # --- Event sink ---

    def handle(self, event: LedgerEvent) -> None:
        day = event.occurred_at.date()

        if isinstance(event, AccountRegistered):
            self._increment(day, StatMetric.USERS_REGISTERED, Decimal("0"))
        elif isinstance(event, DepositApproved):
            self._increment(day, StatMetric.DEPOSITS_APPROVED, event.amount)
        elif isinstance(event, WithdrawalApproved):
            self._increment(day, StatMetric.WITHDRAWALS_APPROVED, event.amount)
        elif isinstance(event, InvestmentOpened):
            self._increment(day, StatMetric.INVESTMENTS_OPENED, event.principal)
        elif isinstance(event, InvestmentPaidOut):
            self._increment(day, StatMetric.INVESTMENTS_PAID_OUT, event.payout)
        elif isinstance(event, InvestmentCancelled):
            self._increment(day, StatMetric.INVESTMENTS_CANCELLED, event.principal)
        elif isinstance(event, (TransactionRejected, AccountStatusChanged)):
            pass
        else:
            raise TypeError(f"Unhandled event type: {type(event).__name__}")

    def _increment(self, day: date, metric: StatMetric, amount: Decimal) -> None:
        """Add one occurrence and `amount` to the (day, metric) counter."""
        if self._bump(day, metric, amount):
            return

        try:
            with self.db.begin_nested():
                self.db.add(DailyStat(day=day, metric=metric, count=1, amount=amount))
        except IntegrityError:
            # A concurrent transaction created the row first
            if not self._bump(day, metric, amount):
                raise

    def _bump(self, day: date, metric: StatMetric, amount: Decimal) -> bool:
        result = self.db.execute(
            update(DailyStat)
            .where(DailyStat.day == day, DailyStat.metric == metric)
            .values(
                count=DailyStat.count + 1,
                amount=DailyStat.amount + amount,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # --- Queries ---

    def _sum(
        self,
        metric: StatMetric,
        column,
        start: date | None = None,
        end: date | None = None,
    ) -> Decimal:
        query = select(func.coalesce(func.sum(column), 0)).where(
            DailyStat.metric == metric
        )
        if start is not None:
            query = query.where(DailyStat.day >= start)
        if end is not None:
            query = query.where(DailyStat.day < end)
        return Decimal(str(self.db.execute(query).scalar()))

    def total_platform_value(self) -> Decimal:
        """Approved deposits minus approved withdrawals, all accounts."""
        try:
            deposits = self._sum(StatMetric.DEPOSITS_APPROVED, DailyStat.amount)
            withdrawals = self._sum(StatMetric.WITHDRAWALS_APPROVED, DailyStat.amount)
        except SQLAlchemyError:
            logger.error("Error calculating total platform value", exc_info=True)
            return Decimal("0")
        return deposits - withdrawals

    def _weekly(self, metric: StatMetric, column, today: date) -> WeeklyStat:
        this_week_start = today - WEEK + timedelta(days=1)
        last_week_start = this_week_start - WEEK
        try:
            current = self._sum(metric, column, start=this_week_start)
            previous = self._sum(
                metric, column, start=last_week_start, end=this_week_start
            )
        except SQLAlchemyError:
            logger.error("Error getting weekly stats for %s", metric.value, exc_info=True)
            return ZERO_WEEK
        return WeeklyStat(
            current_week=current,
            previous_week=previous,
            percentage_change=percentage_change(current, previous),
        )

    def weekly_stats(self, now: datetime | None = None) -> dict[str, WeeklyStat]:
        """
        This week (the 7 days ending today) against the 7 days before.

        Users and investments are counted; deposits and withdrawals
        are summed amounts.
        """
        today = (now or datetime.utcnow()).date()
        return {
            "users": self._weekly(StatMetric.USERS_REGISTERED, DailyStat.count, today),
            "deposits": self._weekly(StatMetric.DEPOSITS_APPROVED, DailyStat.amount, today),
            "investments": self._weekly(StatMetric.INVESTMENTS_OPENED, DailyStat.count, today),
            "withdrawals": self._weekly(StatMetric.WITHDRAWALS_APPROVED, DailyStat.amount, today),
        }

    def recent_transactions(self, limit: int = 10) -> list[RecentTransaction]:
        """The most recent transactions across all accounts, newest first."""
        try:
            rows = self.db.execute(
                select(Transaction, Account.email, Account.full_name)
                .join(Account, Transaction.account_id == Account.id)
                .order_by(Transaction.requested_at.desc(), Transaction.id.desc())
                .limit(limit)
            ).all()
        except SQLAlchemyError:
            logger.error("Error getting recent transactions", exc_info=True)
            return []

        return [
            RecentTransaction(
                id=txn.id,
                account_id=txn.account_id,
                user_email=email,
                user_name=full_name,
                kind=txn.kind.value,
                status=txn.status.value,
                amount=txn.amount,
                requested_at=txn.requested_at,
            )
            for txn, email, full_name in rows
        ]
