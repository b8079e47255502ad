"""
Transaction API endpoints.

Requests are created PENDING; the balance only changes when an
admin approves them (see api/admin.py).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from yield_ledger.api.deps import get_active_account, http_error
from yield_ledger.models.account import Account
from yield_ledger.models.base import get_db
from yield_ledger.models.enums import TransactionKind
from yield_ledger.services.transaction_service import TransactionService
from yield_ledger.schemas.transaction import CashRequest, TransactionResponse

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def _request(
    db: Session, account: Account, kind: TransactionKind, request: CashRequest
):
    service = TransactionService(db)
    try:
        txn = service.request(account.id, kind, request.amount)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/deposit", response_model=TransactionResponse, status_code=201)
def deposit(
    request: CashRequest,
    account: Account = Depends(get_active_account),
    db: Session = Depends(get_db),
):
    """Request a deposit. Credited once an admin confirms receipt."""
    return _request(db, account, TransactionKind.DEPOSIT, request)


@router.post("/withdraw", response_model=TransactionResponse, status_code=201)
def withdraw(
    request: CashRequest,
    account: Account = Depends(get_active_account),
    db: Session = Depends(get_db),
):
    """Request a withdrawal. Debited once an admin approves it."""
    return _request(db, account, TransactionKind.WITHDRAW, request)
