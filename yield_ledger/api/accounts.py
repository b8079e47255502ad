"""
Account API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from yield_ledger.api.deps import (
    get_current_principal,
    get_current_account,
    http_error,
)
from yield_ledger.models.account import Account
from yield_ledger.models.base import get_db
from yield_ledger.services.account_service import AccountService
from yield_ledger.services.audit_service import AuditService
from yield_ledger.services.transaction_service import TransactionService
from yield_ledger.schemas.account import AccountRegister, AccountResponse
from yield_ledger.schemas.audit import AuditEntryResponse
from yield_ledger.schemas.transaction import TransactionResponse

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def register(
    request: AccountRegister,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """
    Create the account for the authenticated user.

    Starts with a zero balance. A valid referral code credits
    the referrer with one referral.
    """
    service = AccountService(db)
    try:
        account = service.register(
            principal,
            email=request.email,
            full_name=request.full_name,
            referral_code=request.referral_code,
        )
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/me", response_model=AccountResponse)
def get_me(account: Account = Depends(get_current_account)):
    """Current account, including its balance."""
    return account


@router.get("/me/transactions", response_model=list[TransactionResponse])
def get_my_transactions(
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """All of the current account's transactions, newest first."""
    return TransactionService(db).list_for_account(account.id)


@router.post("/me/login", response_model=AccountResponse)
def record_login(
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """
    Called by the auth gateway after a successful sign-in.

    Stamps last_login_at on the account, and on the admin record
    when the account is an admin.
    """
    try:
        account = AccountService(db).record_login(account.id)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/me/activity", response_model=list[AuditEntryResponse])
def get_my_activity(
    limit: int = Query(default=50, ge=1, le=500),
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Audit entries about the current account, newest first."""
    return AuditService(db).list_for_account(account.id, limit)
