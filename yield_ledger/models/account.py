"""
Account model.

One row per user. The balance column is the single source of
truth for spendable funds. It is never assigned from Python
values; AccountService changes it with in-database increments
so that concurrent adjustments are never lost.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Integer, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yield_ledger.models.base import Base
from yield_ledger.models.enums import AccountStatus


class Account(Base):
    __tablename__ = "accounts"

    # Assigned by the authentication collaborator
    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    referral_code: Mapped[str] = mapped_column(
        String(16), unique=True, nullable=False, index=True
    )
    referral_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    referred_by_id: Mapped[str | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    status: Mapped[AccountStatus] = mapped_column(
        SAEnum(
            AccountStatus,
            name="account_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )

    # Non-owning back-reference to the referrer
    referred_by: Mapped["Account | None"] = relationship(remote_side=[id])
    transactions: Mapped[list["Transaction"]] = relationship(
        back_populates="account"
    )
    investments: Mapped[list["Investment"]] = relationship(
        back_populates="account"
    )

    def __repr__(self) -> str:
        return f"<Account {self.id} {self.email} ({self.status.value})>"
