"""
Transaction model.

Deposit and withdrawal requests wait in PENDING until an admin
resolves them. Approval is the only place a cash movement
changes the account balance, and it happens exactly once: the
PENDING -> APPROVED swap is guarded on the current status.

Investment and profit rows are historical facts written by the
investment ledger in status COMPLETED. They never move money
themselves.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yield_ledger.models.base import Base
from yield_ledger.models.enums import TransactionKind, TransactionStatus


# Kinds that go through the admin approval workflow
CASH_KINDS = (TransactionKind.DEPOSIT, TransactionKind.WITHDRAW)

# Kinds written by the investment ledger for audit only
RECORD_KINDS = (TransactionKind.INVESTMENT, TransactionKind.PROFIT)


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[str] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    kind: Mapped[TransactionKind] = mapped_column(
        SAEnum(
            TransactionKind,
            name="transaction_kind_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    status: Mapped[TransactionStatus] = mapped_column(
        SAEnum(
            TransactionStatus,
            name="transaction_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=TransactionStatus.PENDING,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    requested_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    processed_by: Mapped[str | None] = mapped_column(
        String(128), nullable=True
    )
    rejection_reason: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )

    # Only set on INVESTMENT and PROFIT records
    investment_id: Mapped[int | None] = mapped_column(
        ForeignKey("investments.id"), nullable=True, index=True
    )
    plan_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    account: Mapped["Account"] = relationship(back_populates="transactions")

    @property
    def user_email(self) -> str:
        return self.account.email

    @property
    def user_name(self) -> str:
        return self.account.full_name

    @property
    def is_resolved(self) -> bool:
        return self.status in (
            TransactionStatus.APPROVED, TransactionStatus.REJECTED
        )

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.kind.value} "
            f"{self.amount} ({self.status.value})>"
        )
