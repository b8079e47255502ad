"""
Account service — the account store.

Owns account registration and the one primitive every other
service uses to move money: adjust_balance(). Balances are
changed with a single in-database increment, never by reading
the balance into Python and writing it back, so two concurrent
adjustments are both reflected.

adjust_balance() does not check for a minimum balance. Callers
that must not overdraw use debit_if_sufficient(), which folds
the check into the same UPDATE statement.
"""

import logging
import secrets
import string
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from yield_ledger.events import (
    EventBus,
    AccountRegistered,
    AccountStatusChanged,
)
from yield_ledger.exceptions import NotFound, Conflict, InsufficientBalance
from yield_ledger.models.account import Account
from yield_ledger.models.admin import Admin
from yield_ledger.models.enums import AccountStatus
from yield_ledger.services.event_bus import default_event_bus

logger = logging.getLogger(__name__)

REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits
REFERRAL_CODE_LENGTH = 8


def generate_referral_code() -> str:
    return "".join(
        secrets.choice(REFERRAL_CODE_ALPHABET)
        for _ in range(REFERRAL_CODE_LENGTH)
    )


class AccountService:

    def __init__(self, db: Session, events: EventBus | None = None):
        self.db = db
        self.events = events or default_event_bus(db)

    def register(
        self,
        account_id: str,
        email: str,
        full_name: str,
        referral_code: str | None = None,
    ) -> Account:
        """
        Create the account for a newly signed-up user.

        The account starts ACTIVE with a zero balance. When a valid
        referral code is given, the referring account's counter is
        incremented. An unknown code is ignored.
        """
        if self.db.get(Account, account_id):
            raise Conflict(f"Account {account_id} already exists")

        existing = self.db.execute(
            select(Account).where(Account.email == email)
        ).scalar_one_or_none()
        if existing:
            raise Conflict(f"Account with email '{email}' already exists")

        referrer = None
        if referral_code:
            referrer = self.get_by_referral_code(referral_code)
            if referrer is None:
                logger.warning("Unknown referral code %s ignored", referral_code)

        account = Account(
            id=account_id,
            email=email,
            full_name=full_name,
            referral_code=self._unique_referral_code(),
            referral_count=0,
            referred_by_id=referrer.id if referrer else None,
            balance=Decimal("0"),
            status=AccountStatus.ACTIVE,
            created_at=datetime.utcnow(),
        )
        self.db.add(account)

        if referrer is not None:
            self.db.execute(
                update(Account)
                .where(Account.id == referrer.id)
                .values(referral_count=Account.referral_count + 1)
                .execution_options(synchronize_session=False)
            )
            self.db.expire(referrer, ["referral_count"])

        self.db.flush()
        self.events.publish(AccountRegistered(
            account_id=account.id,
            referred_by_id=account.referred_by_id,
            occurred_at=account.created_at,
        ))
        return account

    def _unique_referral_code(self) -> str:
        while True:
            code = generate_referral_code()
            if self.get_by_referral_code(code) is None:
                return code

    def get_account(self, account_id: str) -> Account:
        """Get an account by ID."""
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFound(f"Account {account_id} not found")
        return account

    def get_by_referral_code(self, code: str) -> Account | None:
        return self.db.execute(
            select(Account).where(Account.referral_code == code.upper())
        ).scalar_one_or_none()

    def list_accounts(self) -> list[Account]:
        """All accounts, newest first."""
        accounts = self.db.execute(
            select(Account).order_by(Account.created_at.desc(), Account.id)
        ).scalars().all()
        return list(accounts)

    def record_login(self, account_id: str) -> Account:
        """Stamp the login time on the account, and on the admin row if there is one."""
        account = self.get_account(account_id)
        now = datetime.utcnow()
        account.last_login_at = now
        admin = self.db.get(Admin, account_id)
        if admin is not None:
            admin.last_login_at = now
        self.db.flush()
        return account

    def get_balance(self, account_id: str) -> Decimal:
        """Current balance, read from the database rather than the session cache."""
        balance = self.db.execute(
            select(Account.balance).where(Account.id == account_id)
        ).scalar_one_or_none()
        if balance is None:
            raise NotFound(f"Account {account_id} not found")
        return balance

    def adjust_balance(self, account_id: str, delta: Decimal) -> Decimal:
        """
        Add `delta` (negative to debit) to the account balance.

        Runs in the caller's database transaction; the caller
        commits it together with whatever caused the adjustment.
        Returns the new balance.
        """
        result = self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(balance=Account.balance + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise NotFound(f"Account {account_id} not found")
        return self._refreshed_balance(account_id)

    def debit_if_sufficient(self, account_id: str, amount: Decimal) -> Decimal:
        """
        Debit `amount` only if the balance covers it.

        The sufficiency check and the debit are one UPDATE, so a
        concurrent approval or investment cannot slip in between.
        """
        result = self.db.execute(
            update(Account)
            .where(Account.id == account_id, Account.balance >= amount)
            .values(balance=Account.balance - amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            balance = self.get_balance(account_id)
            raise InsufficientBalance(
                f"Insufficient balance: available={balance}, "
                f"requested={amount}"
            )
        return self._refreshed_balance(account_id)

    def _refreshed_balance(self, account_id: str) -> Decimal:
        # Keep any Account already loaded in this session in step
        # with the row we just changed.
        account = self.db.execute(
            select(Account)
            .where(Account.id == account_id)
            .execution_options(populate_existing=True)
        ).scalar_one()
        return account.balance

    def change_status(
        self, account_id: str, new_status: AccountStatus, admin_id: str
    ) -> Account:
        account = self.get_account(account_id)
        old_status = account.status
        if old_status == new_status:
            return account

        account.status = new_status
        self.db.flush()
        self.events.publish(AccountStatusChanged(
            account_id=account.id,
            old_status=old_status.value,
            new_status=new_status.value,
            admin_id=admin_id,
            occurred_at=datetime.utcnow(),
        ))
        logger.info(
            "Account %s status %s -> %s by %s",
            account_id, old_status.value, new_status.value, admin_id,
        )
        return account

    # --- Admin membership (authentication collaborator) ---

    def is_admin(self, account_id: str | None) -> bool:
        if not account_id:
            return False
        return self.db.get(Admin, account_id) is not None

    def grant_admin(self, account_id: str) -> Admin:
        admin = self.db.get(Admin, account_id)
        if admin is None:
            admin = Admin(account_id=account_id)
            self.db.add(admin)
            self.db.flush()
        return admin
