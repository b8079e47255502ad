"""Business logic services."""

from yield_ledger.services.account_service import AccountService
from yield_ledger.services.transaction_service import TransactionService
from yield_ledger.services.investment_service import InvestmentService
from yield_ledger.services.admin_service import AdminService
from yield_ledger.services.stats_service import StatsService
from yield_ledger.services.audit_service import AuditService

__all__ = [
    "AccountService",
    "TransactionService",
    "InvestmentService",
    "AdminService",
    "StatsService",
    "AuditService",
]
