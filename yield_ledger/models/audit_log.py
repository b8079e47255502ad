"""
Audit log model.

Every domain event (a deposit approved, an investment paid out,
an admin cancelling a position) is written here in the same
database transaction as the change itself.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from yield_ledger.models.base import Base


class AuditLog(Base):
    """
    Immutable record of a system event.

    Audit logs are append-only. You never update or delete
    an audit record.
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    account_id: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True
    )
    actor_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    details: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
