"""
Investment service — positions, accrual and payouts.

Money moves in exactly three places:

- open():    principal debited, guarded on balance >= principal
- _settle(): principal + full return credited, guarded on the
             investment still being ACTIVE with payout PENDING
- cancel():  principal refunded when REFUND_ON_CANCEL is set

Admin forced payouts and automatic completion at maturity both go
through _settle(), so a payout is credited at most once however
often either path runs.

Like the other services, nothing here commits, with one
exception: sweep() commits after each investment so that a
failure on one position never holds back the others.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from yield_ledger.config import Settings, get_settings
from yield_ledger.events import (
    EventBus,
    InvestmentOpened,
    InvestmentPaidOut,
    InvestmentCancelled,
)
from yield_ledger.exceptions import (
    LedgerError,
    NotFound,
    InvalidAmount,
    InvalidState,
    AlreadyPaidOut,
    PlanAlreadyActive,
)
from yield_ledger.models.enums import (
    InvestmentStatus,
    PayoutStatus,
    TransactionKind,
)
from yield_ledger.models.investment import Investment, expected_return_for
from yield_ledger.plans import PLANS, validate_amount
from yield_ledger.services import accrual
from yield_ledger.services.account_service import AccountService
from yield_ledger.services.event_bus import default_event_bus
from yield_ledger.services.transaction_service import (
    TransactionService,
    parse_amount,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvestmentStats:
    total_invested: Decimal
    total_profit: Decimal
    active_investments: int
    roi: float


@dataclass
class SweepResult:
    examined: int = 0
    accrued: int = 0
    completed: int = 0
    failed: int = 0


class InvestmentService:

    def __init__(
        self,
        db: Session,
        events: EventBus | None = None,
        settings: Settings | None = None,
    ):
        self.db = db
        self.events = events or default_event_bus(db)
        self.settings = settings or get_settings()
        self.account_service = AccountService(db, self.events)
        self.transaction_service = TransactionService(db, self.events)

    def _reload(self, investment_id: int) -> Investment:
        investment = self.db.execute(
            select(Investment)
            .where(Investment.id == investment_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if investment is None:
            raise NotFound(f"Investment {investment_id} not found")
        return investment

    def open(
        self,
        account_id: str,
        plan_id: str,
        principal,
        rate,
        duration_days: int,
        now: datetime | None = None,
    ) -> Investment:
        """
        Open a position and debit its principal.

        The plan minimum is enforced for plans in the catalog. The
        balance check and the debit are a single guarded UPDATE;
        on InsufficientBalance nothing has been written.
        """
        amount = parse_amount(principal)
        try:
            rate = Decimal(str(rate))
        except InvalidOperation:
            raise InvalidAmount(f"Rate {rate!r} is not a number")
        if not rate.is_finite() or rate < 0:
            raise InvalidAmount(f"Rate must be zero or positive, got {rate}")
        if int(duration_days) <= 0:
            raise InvalidAmount(
                f"Duration must be at least one day, got {duration_days}"
            )

        plan = PLANS.get(plan_id)
        if plan is not None:
            validate_amount(plan, amount)

        self.account_service.get_account(account_id)

        already_active = self.db.execute(
            select(Investment.id).where(
                Investment.account_id == account_id,
                Investment.plan_id == plan_id,
                Investment.status == InvestmentStatus.ACTIVE,
            ).limit(1)
        ).scalar_one_or_none()
        if already_active is not None:
            raise PlanAlreadyActive(
                f"Account {account_id} already has an active investment "
                f"in {plan_id}"
            )

        balance = self.account_service.debit_if_sufficient(account_id, amount)

        now = now or datetime.utcnow()
        investment = Investment(
            account_id=account_id,
            plan_id=plan_id,
            principal=amount,
            rate=rate,
            duration_days=int(duration_days),
            expected_return=expected_return_for(amount, rate),
            accrued_profit=Decimal("0"),
            status=InvestmentStatus.ACTIVE,
            payout_status=PayoutStatus.PENDING,
            opened_at=now,
            matures_at=now + timedelta(days=int(duration_days)),
            last_accrued_at=now,
        )
        self.db.add(investment)
        self.db.flush()

        self.transaction_service.record(
            account_id,
            TransactionKind.INVESTMENT,
            amount,
            investment_id=investment.id,
            plan_id=plan_id,
        )
        self.events.publish(InvestmentOpened(
            account_id=account_id,
            investment_id=investment.id,
            plan_id=plan_id,
            principal=amount,
            occurred_at=now,
        ))
        logger.info(
            "Opened investment %s (%s, %s) for account %s, balance now %s",
            investment.id, plan_id, amount, account_id, balance,
        )
        return investment

    def _settle(
        self, investment_id: int, admin_id: str | None, now: datetime
    ) -> Investment:
        """
        Complete an investment and credit principal + full return.

        The shared payout path for forced payouts and maturity.
        """
        result = self.db.execute(
            update(Investment)
            .where(
                Investment.id == investment_id,
                Investment.status == InvestmentStatus.ACTIVE,
                Investment.payout_status == PayoutStatus.PENDING,
            )
            .values(
                status=InvestmentStatus.COMPLETED,
                payout_status=PayoutStatus.COMPLETED,
                accrued_profit=Investment.expected_return - Investment.principal,
                last_accrued_at=now,
                processed_at=now,
                processed_by=admin_id,
            )
            .execution_options(synchronize_session=False)
        )
        investment = self._reload(investment_id)

        if result.rowcount != 1:
            if investment.payout_status == PayoutStatus.COMPLETED:
                raise AlreadyPaidOut(
                    f"Investment {investment_id} already paid out"
                )
            raise InvalidState(
                f"Investment {investment_id} is {investment.status.value}"
            )

        balance = self.account_service.adjust_balance(
            investment.account_id, investment.expected_return
        )
        self.transaction_service.record(
            investment.account_id,
            TransactionKind.PROFIT,
            investment.max_profit,
            investment_id=investment.id,
            plan_id=investment.plan_id,
        )
        self.events.publish(InvestmentPaidOut(
            account_id=investment.account_id,
            investment_id=investment.id,
            plan_id=investment.plan_id,
            principal=investment.principal,
            payout=investment.expected_return,
            admin_id=admin_id,
            occurred_at=now,
        ))
        logger.info(
            "Paid out investment %s: %s credited to account %s (%s), balance now %s",
            investment.id, investment.expected_return, investment.account_id,
            f"by {admin_id}" if admin_id else "at maturity", balance,
        )
        return investment

    def force_payout(
        self, investment_id: int, admin_id: str, now: datetime | None = None
    ) -> Investment:
        """Admin payout of an active investment, before or after maturity."""
        return self._settle(investment_id, admin_id, now or datetime.utcnow())

    def cancel(
        self, investment_id: int, admin_id: str, now: datetime | None = None
    ) -> Investment:
        """
        Cancel an active investment. No payout is made.

        With REFUND_ON_CANCEL the principal goes back to the account
        in the same database transaction.
        """
        now = now or datetime.utcnow()
        result = self.db.execute(
            update(Investment)
            .where(
                Investment.id == investment_id,
                Investment.status == InvestmentStatus.ACTIVE,
                Investment.payout_status == PayoutStatus.PENDING,
            )
            .values(
                status=InvestmentStatus.CANCELLED,
                processed_at=now,
                processed_by=admin_id,
            )
            .execution_options(synchronize_session=False)
        )
        investment = self._reload(investment_id)
        if result.rowcount != 1:
            raise InvalidState(
                f"Only active investments can be cancelled "
                f"(status: {investment.status.value})"
            )

        refunded = Decimal("0")
        if self.settings.REFUND_ON_CANCEL:
            refunded = investment.principal
            self.account_service.adjust_balance(investment.account_id, refunded)

        self.events.publish(InvestmentCancelled(
            account_id=investment.account_id,
            investment_id=investment.id,
            plan_id=investment.plan_id,
            principal=investment.principal,
            refunded=refunded,
            admin_id=admin_id,
            occurred_at=now,
        ))
        logger.info(
            "Cancelled investment %s by %s, refunded %s",
            investment.id, admin_id, refunded,
        )
        return investment

    # --- Accrual ---

    def accrue(
        self, investment_id: int, now: datetime | None = None
    ) -> Investment:
        """
        Bring an investment's accrued profit up to `now`.

        At maturity the investment is settled through the same path
        as a forced payout. Calling this on a completed or cancelled
        investment, or calling it again with the same `now`, changes
        nothing.
        """
        now = now or datetime.utcnow()
        investment = self._reload(investment_id)
        if (investment.status != InvestmentStatus.ACTIVE
                or investment.payout_status != PayoutStatus.PENDING):
            return investment

        state = accrual.compute(investment, now)
        if state.matured:
            try:
                return self._settle(investment_id, None, now)
            except (AlreadyPaidOut, InvalidState):
                logger.info(
                    "Investment %s settled concurrently, nothing to do",
                    investment_id,
                )
                return self._reload(investment_id)

        # Never lower a stored value, even if `now` went backwards
        self.db.execute(
            update(Investment)
            .where(
                Investment.id == investment_id,
                Investment.status == InvestmentStatus.ACTIVE,
                Investment.accrued_profit < state.accrued_profit,
            )
            .values(accrued_profit=state.accrued_profit, last_accrued_at=now)
            .execution_options(synchronize_session=False)
        )
        return self._reload(investment_id)

    def accrue_account(
        self, account_id: str, now: datetime | None = None
    ) -> list[Investment]:
        """Accrue every active investment of one account."""
        now = now or datetime.utcnow()
        return [
            self.accrue(investment.id, now)
            for investment in self.list_for_account(account_id)
            if investment.status == InvestmentStatus.ACTIVE
        ]

    def sweep(self, now: datetime | None = None) -> SweepResult:
        """
        Accrue all active investments, committing after each one.

        A failure (for example a missing owner account at payout) is
        rolled back and logged; the investment stays ACTIVE with
        payout PENDING and is retried on the next sweep.
        """
        now = now or datetime.utcnow()
        result = SweepResult()
        ids = self.db.execute(
            select(Investment.id)
            .where(
                Investment.status == InvestmentStatus.ACTIVE,
                Investment.payout_status == PayoutStatus.PENDING,
            )
            .order_by(Investment.id)
        ).scalars().all()
        self.db.commit()

        for investment_id in ids:
            result.examined += 1
            try:
                investment = self.accrue(investment_id, now)
                self.db.commit()
            except (LedgerError, SQLAlchemyError):
                self.db.rollback()
                result.failed += 1
                logger.error(
                    "Accrual failed for investment %s, will retry",
                    investment_id, exc_info=True,
                )
                continue

            if investment.status == InvestmentStatus.COMPLETED:
                result.completed += 1
            else:
                result.accrued += 1

        logger.info(
            "Accrual sweep: %s examined, %s accrued, %s completed, %s failed",
            result.examined, result.accrued, result.completed, result.failed,
        )
        return result

    # --- Queries ---

    def get_investment(self, investment_id: int) -> Investment:
        investment = self.db.get(Investment, investment_id)
        if not investment:
            raise NotFound(f"Investment {investment_id} not found")
        return investment

    def list_for_account(self, account_id: str) -> list[Investment]:
        """An account's investments, newest first."""
        investments = self.db.execute(
            select(Investment)
            .where(Investment.account_id == account_id)
            .order_by(Investment.opened_at.desc(), Investment.id.desc())
        ).scalars().all()
        return list(investments)

    def list_all(self) -> list[Investment]:
        """Every investment across all accounts, newest first."""
        investments = self.db.execute(
            select(Investment)
            .options(selectinload(Investment.account))
            .order_by(Investment.opened_at.desc(), Investment.id.desc())
        ).scalars().all()
        return list(investments)

    def investment_stats(self, account_id: str) -> InvestmentStats:
        """
        Totals over an account's investments.

        Profit counts what has accrued on active positions and the
        full return on completed ones. Cancelled positions count
        towards the amount invested only.
        """
        total_invested = Decimal("0")
        total_profit = Decimal("0")
        active = 0
        for investment in self.list_for_account(account_id):
            total_invested += investment.principal
            if investment.status == InvestmentStatus.ACTIVE:
                active += 1
                total_profit += investment.accrued_profit
            elif investment.status == InvestmentStatus.COMPLETED:
                total_profit += investment.max_profit

        roi = (
            float(total_profit / total_invested * 100)
            if total_invested > 0 else 0.0
        )
        return InvestmentStats(
            total_invested=total_invested,
            total_profit=total_profit,
            active_investments=active,
            roi=roi,
        )
