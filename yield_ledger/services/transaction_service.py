"""
Transaction service — deposit and withdrawal requests.

A request never moves money. It waits in PENDING until an admin
approves or rejects it:

1. Swap the status PENDING -> APPROVED/REJECTED with an UPDATE
   guarded on status = PENDING (fails if someone got there first)
2. On approval, adjust the account balance (+ for deposits,
   - for withdrawals) in the same database transaction
3. Publish the domain event (reporting counters, audit log)

Nothing is committed here. The caller commits on success and
rolls back on any error, so the status change and the balance
change land together or not at all.
"""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from yield_ledger.events import (
    EventBus,
    DepositApproved,
    WithdrawalApproved,
    TransactionRejected,
)
from yield_ledger.exceptions import (
    NotFound,
    InvalidAmount,
    InvalidKind,
    AlreadyProcessed,
    EmptyReason,
)
from yield_ledger.models.enums import TransactionKind, TransactionStatus
from yield_ledger.models.transaction import Transaction, CASH_KINDS, RECORD_KINDS
from yield_ledger.services.account_service import AccountService
from yield_ledger.services.event_bus import default_event_bus

logger = logging.getLogger(__name__)


def parse_amount(amount) -> Decimal:
    """Coerce to a positive Decimal or raise InvalidAmount."""
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount(f"Amount {amount!r} is not a number")
    if not value.is_finite() or value <= 0:
        raise InvalidAmount(f"Amount must be positive, got {amount}")
    return value


class TransactionService:

    def __init__(self, db: Session, events: EventBus | None = None):
        self.db = db
        self.events = events or default_event_bus(db)
        self.account_service = AccountService(db, self.events)

    def request(
        self, account_id: str, kind: TransactionKind, amount
    ) -> Transaction:
        """Create a PENDING deposit or withdrawal request."""
        if kind not in CASH_KINDS:
            raise InvalidKind(f"Cannot request a {kind.value} transaction")
        value = parse_amount(amount)
        self.account_service.get_account(account_id)

        txn = Transaction(
            account_id=account_id,
            kind=kind,
            status=TransactionStatus.PENDING,
            amount=value,
            requested_at=datetime.utcnow(),
        )
        self.db.add(txn)
        self.db.flush()
        logger.info(
            "%s request %s of %s for account %s",
            kind.value, txn.id, value, account_id,
        )
        return txn

    def record(
        self,
        account_id: str,
        kind: TransactionKind,
        amount: Decimal,
        investment_id: int,
        plan_id: str,
    ) -> Transaction:
        """Append an informational investment or profit record."""
        if kind not in RECORD_KINDS:
            raise InvalidKind(f"{kind.value} is not an informational record")

        txn = Transaction(
            account_id=account_id,
            kind=kind,
            status=TransactionStatus.COMPLETED,
            amount=amount,
            requested_at=datetime.utcnow(),
            investment_id=investment_id,
            plan_id=plan_id,
        )
        self.db.add(txn)
        self.db.flush()
        return txn

    def _resolve(self, transaction_id: int, values: dict) -> Transaction:
        """
        Move a PENDING cash transaction to a resolved status.

        The WHERE clause is the guard: of two concurrent calls only
        one UPDATE matches a row. The other sees rowcount 0 and
        reports AlreadyProcessed.
        """
        result = self.db.execute(
            update(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.status == TransactionStatus.PENDING,
                Transaction.kind.in_(CASH_KINDS),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        txn = self.db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

        if txn is None:
            raise NotFound(f"Transaction {transaction_id} not found")
        if result.rowcount != 1:
            raise AlreadyProcessed(
                f"Transaction {transaction_id} is not pending "
                f"(status: {txn.status.value})"
            )
        return txn

    def approve(self, transaction_id: int, admin_id: str) -> Transaction:
        """
        Approve a pending deposit or withdrawal and move the money.

        Deposits credit the account, withdrawals debit it. The
        withdrawal is not re-checked against the balance here; the
        admin's approval is the attestation that funds were paid out.
        """
        now = datetime.utcnow()
        txn = self._resolve(transaction_id, {
            "status": TransactionStatus.APPROVED,
            "processed_at": now,
            "processed_by": admin_id,
        })

        if txn.kind == TransactionKind.DEPOSIT:
            delta = txn.amount
            event = DepositApproved(
                account_id=txn.account_id,
                transaction_id=txn.id,
                amount=txn.amount,
                admin_id=admin_id,
                occurred_at=now,
            )
        else:
            delta = -txn.amount
            event = WithdrawalApproved(
                account_id=txn.account_id,
                transaction_id=txn.id,
                amount=txn.amount,
                admin_id=admin_id,
                occurred_at=now,
            )

        balance = self.account_service.adjust_balance(txn.account_id, delta)
        self.events.publish(event)
        logger.info(
            "Approved %s %s of %s by %s, account %s balance now %s",
            txn.kind.value, txn.id, txn.amount, admin_id,
            txn.account_id, balance,
        )
        return txn

    def reject(
        self, transaction_id: int, admin_id: str, reason: str
    ) -> Transaction:
        """Reject a pending deposit or withdrawal. No money moves."""
        if not reason or not reason.strip():
            raise EmptyReason("A rejection reason is required")

        now = datetime.utcnow()
        txn = self._resolve(transaction_id, {
            "status": TransactionStatus.REJECTED,
            "processed_at": now,
            "processed_by": admin_id,
            "rejection_reason": reason.strip(),
        })
        self.events.publish(TransactionRejected(
            account_id=txn.account_id,
            transaction_id=txn.id,
            amount=txn.amount,
            admin_id=admin_id,
            reason=txn.rejection_reason,
            occurred_at=now,
        ))
        logger.info(
            "Rejected %s %s by %s: %s",
            txn.kind.value, txn.id, admin_id, txn.rejection_reason,
        )
        return txn

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Get a transaction by ID."""
        txn = self.db.get(Transaction, transaction_id)
        if not txn:
            raise NotFound(f"Transaction {transaction_id} not found")
        return txn

    def list_pending(self) -> list[Transaction]:
        """Pending deposits and withdrawals across all accounts, newest first."""
        txns = self.db.execute(
            select(Transaction)
            .where(
                Transaction.status == TransactionStatus.PENDING,
                Transaction.kind.in_(CASH_KINDS),
            )
            .options(selectinload(Transaction.account))
            .order_by(Transaction.requested_at.desc(), Transaction.id.desc())
        ).scalars().all()
        return list(txns)

    def list_all(self, limit: int = 50) -> list[Transaction]:
        """Every transaction on the platform, newest first, with its owner loaded."""
        txns = self.db.execute(
            select(Transaction)
            .options(selectinload(Transaction.account))
            .order_by(Transaction.requested_at.desc(), Transaction.id.desc())
            .limit(limit)
        ).scalars().all()
        return list(txns)

    def list_for_account(self, account_id: str) -> list[Transaction]:
        """All transactions for an account, newest first."""
        txns = self.db.execute(
            select(Transaction)
            .where(Transaction.account_id == account_id)
            .order_by(Transaction.requested_at.desc(), Transaction.id.desc())
        ).scalars().all()
        return list(txns)
