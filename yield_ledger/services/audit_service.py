"""
Audit service — records every domain event in the audit log.

Subscribed to the event bus, so each audit row is written in the
same database transaction as the change it describes.
"""

import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from yield_ledger.events import LedgerEvent, event_name, event_payload
from yield_ledger.models.audit_log import AuditLog


class AuditService:

    def __init__(self, db: Session):
        self.db = db

    def record(self, event: LedgerEvent) -> AuditLog:
        payload = event_payload(event)
        entry = AuditLog(
            event_type=event_name(event),
            account_id=payload.get("account_id"),
            actor_id=payload.get("admin_id"),
            details=json.dumps(payload, sort_keys=True),
        )
        self.db.add(entry)
        return entry

    def list_for_account(self, account_id: str, limit: int = 50) -> list[AuditLog]:
        """Audit entries about an account, newest first."""
        entries = self.db.execute(
            select(AuditLog)
            .where(AuditLog.account_id == account_id)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(limit)
        ).scalars().all()
        return list(entries)
