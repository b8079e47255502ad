"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from yield_ledger.models.base import Base
from yield_ledger.models.enums import (
    AccountStatus,
    TransactionKind,
    TransactionStatus,
    InvestmentStatus,
    PayoutStatus,
    StatMetric,
)
from yield_ledger.models.audit_log import AuditLog
from yield_ledger.models.account import Account
from yield_ledger.models.admin import Admin
from yield_ledger.models.transaction import Transaction
from yield_ledger.models.investment import Investment
from yield_ledger.models.daily_stat import DailyStat

__all__ = [
    "Base",
    "AccountStatus",
    "TransactionKind",
    "TransactionStatus",
    "InvestmentStatus",
    "PayoutStatus",
    "StatMetric",
    "AuditLog",
    "Account",
    "Admin",
    "Transaction",
    "Investment",
    "DailyStat",
]
