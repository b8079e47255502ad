"""
Admin service — the approval workflow.

A thin gate in front of the transaction and investment ledgers.
The acting principal is passed in by the API layer and is
mandatory; every operation checks it is an admin and then
delegates with admin_id = principal_id. No business rules live
here.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from yield_ledger.events import EventBus
from yield_ledger.exceptions import Unauthorized
from yield_ledger.models.account import Account
from yield_ledger.models.enums import AccountStatus
from yield_ledger.models.investment import Investment
from yield_ledger.models.transaction import Transaction
from yield_ledger.services.account_service import AccountService
from yield_ledger.services.event_bus import default_event_bus
from yield_ledger.services.investment_service import (
    InvestmentService,
    SweepResult,
)
from yield_ledger.services.stats_service import (
    StatsService,
    WeeklyStat,
    RecentTransaction,
)
from yield_ledger.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformReport:
    total_platform_value: Decimal
    weekly: dict[str, WeeklyStat]
    recent_transactions: list[RecentTransaction]


class AdminService:

    def __init__(
        self,
        db: Session,
        principal_id: str,
        events: EventBus | None = None,
    ):
        if not principal_id:
            raise Unauthorized("An authenticated principal is required")
        self.db = db
        self.principal_id = principal_id
        self.events = events or default_event_bus(db)
        self.account_service = AccountService(db, self.events)
        self.transaction_service = TransactionService(db, self.events)
        self.investment_service = InvestmentService(db, self.events)

    def _require_admin(self) -> str:
        if not self.account_service.is_admin(self.principal_id):
            logger.warning(
                "Non-admin %s attempted an admin operation", self.principal_id
            )
            raise Unauthorized(f"{self.principal_id} is not an admin")
        return self.principal_id

    # --- Transactions ---

    def list_pending(self) -> list[Transaction]:
        self._require_admin()
        return self.transaction_service.list_pending()

    def list_transactions(self, limit: int = 50) -> list[Transaction]:
        self._require_admin()
        return self.transaction_service.list_all(limit)

    def approve_transaction(self, transaction_id: int) -> Transaction:
        admin_id = self._require_admin()
        return self.transaction_service.approve(transaction_id, admin_id)

    def reject_transaction(self, transaction_id: int, reason: str) -> Transaction:
        admin_id = self._require_admin()
        return self.transaction_service.reject(transaction_id, admin_id, reason)

    # --- Investments ---

    def list_investments(self) -> list[Investment]:
        self._require_admin()
        return self.investment_service.list_all()

    def cancel_investment(self, investment_id: int) -> Investment:
        admin_id = self._require_admin()
        return self.investment_service.cancel(investment_id, admin_id)

    def process_payout(self, investment_id: int) -> Investment:
        admin_id = self._require_admin()
        return self.investment_service.force_payout(investment_id, admin_id)

    def run_sweep(self, now: datetime | None = None) -> SweepResult:
        self._require_admin()
        return self.investment_service.sweep(now)

    # --- Users ---

    def list_accounts(self) -> list[Account]:
        self._require_admin()
        return self.account_service.list_accounts()

    def change_account_status(
        self, account_id: str, new_status: AccountStatus
    ) -> Account:
        admin_id = self._require_admin()
        return self.account_service.change_status(account_id, new_status, admin_id)

    # --- Reporting ---

    def platform_stats(
        self, recent_limit: int = 10, now: datetime | None = None
    ) -> PlatformReport:
        self._require_admin()
        stats = StatsService(self.db)
        return PlatformReport(
            total_platform_value=stats.total_platform_value(),
            weekly=stats.weekly_stats(now),
            recent_transactions=stats.recent_transactions(recent_limit),
        )
