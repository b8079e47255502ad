"""
Tests for the background accrual sweep.
"""

import time
from datetime import datetime, timedelta
from decimal import Decimal

from conftest import TestSessionLocal
from yield_ledger.models.enums import InvestmentStatus
from yield_ledger.scheduler import AccrualScheduler
from yield_ledger.services.account_service import AccountService
from yield_ledger.services.investment_service import InvestmentService


def open_matured(db_session, account_id):
    """Helper: a starter investment opened long enough ago to have matured."""
    investment = InvestmentService(db_session).open(
        account_id, "starter_plan", Decimal("500"), Decimal("5"), 7,
        now=datetime.utcnow() - timedelta(days=8),
    )
    db_session.commit()
    return investment


class TestAccrualScheduler:

    def test_run_once_settles_matured(self, db_session, funded_account):
        investment = open_matured(db_session, funded_account.id)

        result = AccrualScheduler(TestSessionLocal, 60).run_once()

        assert result.completed == 1
        db_session.expire_all()
        assert InvestmentService(db_session).get_investment(investment.id).status == InvestmentStatus.COMPLETED
        assert AccountService(db_session).get_balance(funded_account.id) == Decimal("10025")

    def test_start_and_stop(self, db_session, funded_account):
        investment = open_matured(db_session, funded_account.id)
        scheduler = AccrualScheduler(TestSessionLocal, 0.05)

        scheduler.start()
        try:
            assert scheduler.running
            deadline = time.monotonic() + 5
            while time.monotonic() < deadline:
                db_session.expire_all()
                if InvestmentService(db_session).get_investment(investment.id).status == InvestmentStatus.COMPLETED:
                    break
                db_session.commit()
                time.sleep(0.05)
        finally:
            scheduler.stop()

        assert not scheduler.running
        db_session.expire_all()
        assert AccountService(db_session).get_balance(funded_account.id) == Decimal("10025")

    def test_start_twice_keeps_one_thread(self):
        scheduler = AccrualScheduler(TestSessionLocal, 60)
        scheduler.start()
        try:
            thread = scheduler._thread
            scheduler.start()
            assert scheduler._thread is thread
        finally:
            scheduler.stop()
