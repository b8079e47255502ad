"""
Domain events.

Every mutating ledger operation describes what happened as one
of the event types below and publishes it on an EventBus. The
subscribers (reporting counters and the audit trail) run inside
the caller's database transaction, so an event is recorded if
and only if the change that produced it is committed.
"""

import logging
from dataclasses import dataclass, asdict, field
from datetime import datetime
from decimal import Decimal
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountRegistered:
    account_id: str
    referred_by_id: str | None
    occurred_at: datetime


@dataclass(frozen=True)
class DepositApproved:
    account_id: str
    transaction_id: int
    amount: Decimal
    admin_id: str
    occurred_at: datetime


@dataclass(frozen=True)
class WithdrawalApproved:
    account_id: str
    transaction_id: int
    amount: Decimal
    admin_id: str
    occurred_at: datetime


@dataclass(frozen=True)
class TransactionRejected:
    account_id: str
    transaction_id: int
    amount: Decimal
    admin_id: str
    reason: str
    occurred_at: datetime


@dataclass(frozen=True)
class InvestmentOpened:
    account_id: str
    investment_id: int
    plan_id: str
    principal: Decimal
    occurred_at: datetime


@dataclass(frozen=True)
class InvestmentPaidOut:
    account_id: str
    investment_id: int
    plan_id: str
    principal: Decimal
    payout: Decimal
    # None when the accrual engine completed the investment
    admin_id: str | None
    occurred_at: datetime


@dataclass(frozen=True)
class InvestmentCancelled:
    account_id: str
    investment_id: int
    plan_id: str
    principal: Decimal
    refunded: Decimal
    admin_id: str
    occurred_at: datetime


@dataclass(frozen=True)
class AccountStatusChanged:
    account_id: str
    old_status: str
    new_status: str
    admin_id: str
    occurred_at: datetime


LedgerEvent = (
    AccountRegistered
    | DepositApproved
    | WithdrawalApproved
    | TransactionRejected
    | InvestmentOpened
    | InvestmentPaidOut
    | InvestmentCancelled
    | AccountStatusChanged
)


def event_name(event: LedgerEvent) -> str:
    return type(event).__name__


def event_payload(event: LedgerEvent) -> dict:
    """JSON-friendly dict of an event's fields."""
    payload = {}
    for key, value in asdict(event).items():
        if isinstance(value, Decimal):
            payload[key] = str(value)
        elif isinstance(value, datetime):
            payload[key] = value.isoformat()
        else:
            payload[key] = value
    return payload


@dataclass
class EventBus:
    """Synchronous publish/subscribe.

    A subscriber that raises aborts the publishing operation. The
    caller rolls back, and the change and its event disappear together.
    """

    subscribers: list[Callable[[LedgerEvent], None]] = field(default_factory=list)

    def subscribe(self, handler: Callable[[LedgerEvent], None]) -> None:
        self.subscribers.append(handler)

    def publish(self, event: LedgerEvent) -> None:
        logger.debug("Publishing %s", event_name(event))
        for handler in self.subscribers:
            handler(event)
