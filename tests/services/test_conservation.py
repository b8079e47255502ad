"""
Property-based tests for money conservation.

Random interleavings of requests, approvals, investments,
accrual, cancellations and payouts must never create or destroy
money. With refunds on cancel, at every point:

    sum(balances) = approved deposits - approved withdrawals
                    - principal of active investments
                    + payouts of completed investments
"""

from datetime import datetime, timedelta
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from sqlalchemy import func, select

from conftest import TestSessionLocal, engine
from yield_ledger.exceptions import LedgerError
from yield_ledger.models.account import Account
from yield_ledger.models.base import Base
from yield_ledger.models.enums import (
    InvestmentStatus,
    PayoutStatus,
    TransactionKind,
    TransactionStatus,
)
from yield_ledger.models.investment import Investment
from yield_ledger.models.transaction import Transaction
from yield_ledger.plans import PLANS
from yield_ledger.services.account_service import AccountService
from yield_ledger.services.investment_service import InvestmentService
from yield_ledger.services.transaction_service import TransactionService

ADMIN = "admin"
USERS = ["alice", "bob"]
START = datetime(2026, 6, 1)

amounts = st.integers(min_value=1, max_value=20000).map(Decimal)

operations = st.lists(
    st.one_of(
        st.tuples(st.just("deposit"), st.sampled_from(USERS), amounts, st.booleans()),
        st.tuples(st.just("withdraw"), st.sampled_from(USERS), amounts, st.booleans()),
        st.tuples(st.just("invest"), st.sampled_from(USERS), st.sampled_from(sorted(PLANS)), amounts),
        st.tuples(st.just("advance"), st.integers(min_value=1, max_value=20 * 24)),
        st.tuples(st.just("cancel"), st.integers(min_value=1, max_value=10)),
        st.tuples(st.just("payout"), st.integers(min_value=1, max_value=10)),
        st.tuples(st.just("sweep")),
    ),
    max_size=25,
)


def total(db, column, *criteria):
    value = db.execute(select(func.coalesce(func.sum(column), 0)).where(*criteria)).scalar()
    return Decimal(str(value))


def assert_conserved(db):
    balances = total(db, Account.balance)
    deposits = total(
        db, Transaction.amount,
        Transaction.kind == TransactionKind.DEPOSIT,
        Transaction.status == TransactionStatus.APPROVED,
    )
    withdrawals = total(
        db, Transaction.amount,
        Transaction.kind == TransactionKind.WITHDRAW,
        Transaction.status == TransactionStatus.APPROVED,
    )
    active = total(db, Investment.principal, Investment.status == InvestmentStatus.ACTIVE)
    paid = total(db, Investment.expected_return, Investment.status == InvestmentStatus.COMPLETED)

    assert abs(balances - (deposits - withdrawals - active + paid)) < Decimal("0.01")


def assert_investments_consistent(db):
    for investment in db.execute(select(Investment)).scalars():
        assert Decimal("0") <= investment.accrued_profit <= investment.max_profit
        completed = investment.status == InvestmentStatus.COMPLETED
        assert (investment.payout_status == PayoutStatus.COMPLETED) == completed


def apply(db, op, now):
    transactions = TransactionService(db)
    investments = InvestmentService(db)
    kind = op[0]

    if kind in ("deposit", "withdraw"):
        _, user, amount, approve = op
        txn_kind = TransactionKind.DEPOSIT if kind == "deposit" else TransactionKind.WITHDRAW
        txn = transactions.request(user, txn_kind, amount)
        if approve:
            transactions.approve(txn.id, ADMIN)
        else:
            transactions.reject(txn.id, ADMIN, "Not received")
    elif kind == "invest":
        _, user, plan_id, amount = op
        plan = PLANS[plan_id]
        investments.open(user, plan_id, amount, plan.rate, plan.duration_days, now=now)
    elif kind == "cancel":
        investments.cancel(op[1], ADMIN, now=now)
    elif kind == "payout":
        investments.force_payout(op[1], ADMIN, now=now)
    elif kind == "sweep":
        investments.sweep(now)


@settings(
    max_examples=30,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture, HealthCheck.too_slow],
)
@given(operations)
def test_money_is_conserved(ops):
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestSessionLocal()
    try:
        accounts = AccountService(db)
        for account_id in [ADMIN] + USERS:
            accounts.register(account_id, f"{account_id}@example.com", account_id.title())
        accounts.grant_admin(ADMIN)
        db.commit()

        now = START
        for op in ops:
            if op[0] == "advance":
                now += timedelta(hours=op[1])
                continue
            try:
                apply(db, op, now)
                db.commit()
            except LedgerError:
                db.rollback()

            assert_conserved(db)
            assert_investments_consistent(db)
    finally:
        db.close()
