"""Default wiring of the domain event bus for a database session."""

from sqlalchemy.orm import Session

from yield_ledger.events import EventBus
from yield_ledger.services.audit_service import AuditService
from yield_ledger.services.stats_service import StatsService


def default_event_bus(db: Session) -> EventBus:
    """An EventBus that updates reporting counters and the audit log in `db`."""
    bus = EventBus()
    bus.subscribe(StatsService(db).handle)
    bus.subscribe(AuditService(db).record)
    return bus
