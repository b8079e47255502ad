"""
Shared API dependencies.

Authentication itself happens upstream. The gateway forwards the
authenticated user's id in the X-Account-Id header; this module
turns that header into the principal every endpoint receives.
There is no default principal: a request without the header is
rejected with 401.
"""

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from yield_ledger.exceptions import (
    NotFound,
    Unauthorized,
    AlreadyProcessed,
    AlreadyPaidOut,
    Conflict,
    PlanAlreadyActive,
    InvalidState,
)
from yield_ledger.models.account import Account
from yield_ledger.models.base import get_db
from yield_ledger.models.enums import AccountStatus

# Checked in order; anything else derived from ValueError is a 400
ERROR_STATUS_CODES = (
    (NotFound, 404),
    (Unauthorized, 403),
    ((AlreadyProcessed, AlreadyPaidOut, Conflict, PlanAlreadyActive, InvalidState), 409),
)


def http_error(error: ValueError) -> HTTPException:
    """Map a service error to the HTTP error the client sees."""
    for error_types, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_types):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


def get_current_principal(
    x_account_id: str | None = Header(default=None),
) -> str:
    if not x_account_id or not x_account_id.strip():
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_account_id.strip()


def get_current_account(
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> Account:
    account = db.get(Account, principal)
    if not account:
        raise HTTPException(
            status_code=404, detail=f"Account {principal} not found"
        )
    return account


def get_active_account(
    account: Account = Depends(get_current_account),
) -> Account:
    """The current account, refused if it has been suspended."""
    if account.status != AccountStatus.ACTIVE:
        raise HTTPException(
            status_code=403, detail=f"Account {account.id} is suspended"
        )
    return account
