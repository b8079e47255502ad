"""
Admin model.

The set of account ids the authentication collaborator treats
as administrators. Membership is all that matters; the row
carries no privileges of its own.
"""

from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from yield_ledger.models.base import Base


class Admin(Base):
    __tablename__ = "admins"

    account_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    def __repr__(self) -> str:
        return f"<Admin {self.account_id}>"
