"""
Admin API endpoints.

Every route takes the principal from the X-Account-Id header and
hands it to AdminService, which refuses non-admins with 403.
AlreadyProcessed and AlreadyPaidOut come back as 409: the work
was already done, nothing changed.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from yield_ledger.api.deps import get_current_principal, http_error
from yield_ledger.config import get_settings
from yield_ledger.models.base import get_db
from yield_ledger.services.admin_service import AdminService
from yield_ledger.schemas.account import AccountResponse, AccountStatusUpdate
from yield_ledger.schemas.investment import (
    AdminInvestmentResponse,
    InvestmentResponse,
    SweepResponse,
)
from yield_ledger.schemas.stats import (
    PlatformStatsResponse,
    WeeklyStatResponse,
    RecentTransactionResponse,
)
from yield_ledger.schemas.transaction import (
    AdminTransactionResponse,
    RejectRequest,
    TransactionResponse,
)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_admin_service(
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> AdminService:
    return AdminService(db, principal)


# --- Transactions ---

@router.get(
    "/transactions/pending", response_model=list[AdminTransactionResponse]
)
def list_pending(service: AdminService = Depends(get_admin_service)):
    """Pending deposits and withdrawals, newest first."""
    try:
        return service.list_pending()
    except ValueError as e:
        raise http_error(e)


@router.get("/transactions", response_model=list[AdminTransactionResponse])
def list_transactions(
    limit: int = Query(default=50, ge=1, le=500),
    service: AdminService = Depends(get_admin_service),
):
    """Every transaction of every kind, newest first."""
    try:
        return service.list_transactions(limit)
    except ValueError as e:
        raise http_error(e)


@router.post(
    "/transactions/{transaction_id}/approve",
    response_model=TransactionResponse,
)
def approve_transaction(
    transaction_id: int,
    service: AdminService = Depends(get_admin_service),
    db: Session = Depends(get_db),
):
    """Approve a pending request and move the money."""
    try:
        txn = service.approve_transaction(transaction_id)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post(
    "/transactions/{transaction_id}/reject",
    response_model=TransactionResponse,
)
def reject_transaction(
    transaction_id: int,
    request: RejectRequest,
    service: AdminService = Depends(get_admin_service),
    db: Session = Depends(get_db),
):
    """Reject a pending request. A reason is required."""
    try:
        txn = service.reject_transaction(transaction_id, request.reason)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)


# --- Investments ---

@router.get("/investments", response_model=list[AdminInvestmentResponse])
def list_investments(service: AdminService = Depends(get_admin_service)):
    try:
        return service.list_investments()
    except ValueError as e:
        raise http_error(e)


@router.post(
    "/investments/{investment_id}/cancel",
    response_model=InvestmentResponse,
)
def cancel_investment(
    investment_id: int,
    service: AdminService = Depends(get_admin_service),
    db: Session = Depends(get_db),
):
    try:
        investment = service.cancel_investment(investment_id)
        db.commit()
        return investment
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post(
    "/investments/{investment_id}/payout",
    response_model=InvestmentResponse,
)
def process_payout(
    investment_id: int,
    service: AdminService = Depends(get_admin_service),
    db: Session = Depends(get_db),
):
    """Pay out principal plus the full return now, even before maturity."""
    try:
        investment = service.process_payout(investment_id)
        db.commit()
        return investment
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/investments/sweep", response_model=SweepResponse)
def run_sweep(service: AdminService = Depends(get_admin_service)):
    """Run the accrual sweep now. Commits per investment."""
    try:
        return service.run_sweep()
    except ValueError as e:
        raise http_error(e)


# --- Users ---

@router.get("/accounts", response_model=list[AccountResponse])
def list_accounts(service: AdminService = Depends(get_admin_service)):
    try:
        return service.list_accounts()
    except ValueError as e:
        raise http_error(e)


@router.patch("/accounts/{account_id}/status", response_model=AccountResponse)
def change_account_status(
    account_id: str,
    request: AccountStatusUpdate,
    service: AdminService = Depends(get_admin_service),
    db: Session = Depends(get_db),
):
    try:
        account = service.change_account_status(account_id, request.new_status)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


# --- Reporting ---

@router.get("/stats", response_model=PlatformStatsResponse)
def platform_stats(service: AdminService = Depends(get_admin_service)):
    """Platform value, weekly figures and the recent transaction feed."""
    try:
        report = service.platform_stats(get_settings().RECENT_TRANSACTIONS_LIMIT)
    except ValueError as e:
        raise http_error(e)

    weekly = report.weekly
    return PlatformStatsResponse(
        total_platform_value=report.total_platform_value,
        users=WeeklyStatResponse.model_validate(weekly["users"]),
        deposits=WeeklyStatResponse.model_validate(weekly["deposits"]),
        investments=WeeklyStatResponse.model_validate(weekly["investments"]),
        withdrawals=WeeklyStatResponse.model_validate(weekly["withdrawals"]),
        recent_transactions=[
            RecentTransactionResponse.model_validate(t)
            for t in report.recent_transactions
        ],
    )
