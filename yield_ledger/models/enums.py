"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid transaction kind
or investment status is caught at the database level, not
just in Python validation.
"""

import enum


class AccountStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class TransactionKind(str, enum.Enum):
    """
    DEPOSIT and WITHDRAW go through admin approval.
    INVESTMENT and PROFIT are informational records written
    by the investment ledger.
    """
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    INVESTMENT = "INVESTMENT"
    PROFIT = "PROFIT"


class TransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"


class InvestmentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PayoutStatus(str, enum.Enum):
    """Whether the payout credit has been applied. Tracked apart
    from InvestmentStatus so the payout step is idempotent."""
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class StatMetric(str, enum.Enum):
    """Counters maintained by the reporting event sink."""
    USERS_REGISTERED = "USERS_REGISTERED"
    DEPOSITS_APPROVED = "DEPOSITS_APPROVED"
    WITHDRAWALS_APPROVED = "WITHDRAWALS_APPROVED"
    INVESTMENTS_OPENED = "INVESTMENTS_OPENED"
    INVESTMENTS_PAID_OUT = "INVESTMENTS_PAID_OUT"
    INVESTMENTS_CANCELLED = "INVESTMENTS_CANCELLED"
