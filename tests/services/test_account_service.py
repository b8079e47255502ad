"""
Tests for the AccountService.
"""

from decimal import Decimal

import pytest

from yield_ledger.exceptions import NotFound, Conflict, InsufficientBalance
from yield_ledger.models.admin import Admin
from yield_ledger.models.audit_log import AuditLog
from yield_ledger.models.enums import AccountStatus
from yield_ledger.services.account_service import AccountService


def register(db_session, account_id="user-1", email=None, referral_code=None):
    """Helper: register an account and commit."""
    account = AccountService(db_session).register(
        account_id,
        email=email or f"{account_id}@example.com",
        full_name="Test User",
        referral_code=referral_code,
    )
    db_session.commit()
    return account


class TestRegister:

    def test_new_account_starts_empty_and_active(self, db_session):
        account = register(db_session)

        assert account.balance == Decimal("0")
        assert account.status == AccountStatus.ACTIVE
        assert account.referral_count == 0
        assert account.referred_by_id is None
        assert account.created_at is not None

    def test_referral_code_generated(self, db_session):
        account = register(db_session)

        assert len(account.referral_code) == 8
        assert account.referral_code.isalnum()
        assert account.referral_code == account.referral_code.upper()

    def test_referral_codes_are_unique(self, db_session):
        first = register(db_session, "user-1")
        second = register(db_session, "user-2")
        assert first.referral_code != second.referral_code

    def test_duplicate_id_rejected(self, db_session):
        register(db_session, "user-1")
        with pytest.raises(Conflict, match="already exists"):
            register(db_session, "user-1", email="other@example.com")

    def test_duplicate_email_rejected(self, db_session):
        register(db_session, "user-1", email="same@example.com")
        with pytest.raises(Conflict, match="same@example.com"):
            register(db_session, "user-2", email="same@example.com")

    def test_valid_referral_code_credits_referrer(self, db_session):
        referrer = register(db_session, "referrer")
        referred = register(
            db_session, "referred", referral_code=referrer.referral_code
        )

        db_session.refresh(referrer)
        assert referrer.referral_count == 1
        assert referred.referred_by_id == referrer.id

    def test_referral_code_is_case_insensitive(self, db_session):
        referrer = register(db_session, "referrer")
        referred = register(
            db_session, "referred", referral_code=referrer.referral_code.lower()
        )
        assert referred.referred_by_id == referrer.id

    def test_unknown_referral_code_ignored(self, db_session):
        account = register(db_session, referral_code="NOSUCH00")
        assert account.referred_by_id is None

    def test_registration_is_audited(self, db_session):
        register(db_session)
        entries = db_session.query(AuditLog).all()
        assert [e.event_type for e in entries] == ["AccountRegistered"]
        assert entries[0].account_id == "user-1"


class TestBalance:

    def test_get_account_not_found(self, db_session):
        with pytest.raises(NotFound, match="not found"):
            AccountService(db_session).get_account("ghost")

    def test_adjust_balance_credits_and_debits(self, db_session):
        register(db_session)
        service = AccountService(db_session)

        assert service.adjust_balance("user-1", Decimal("100.50")) == Decimal("100.50")
        assert service.adjust_balance("user-1", Decimal("-40.25")) == Decimal("60.25")

    def test_adjust_balance_refreshes_loaded_account(self, db_session):
        account = register(db_session)
        service = AccountService(db_session)

        service.adjust_balance("user-1", Decimal("75"))
        assert account.balance == Decimal("75")

    def test_adjust_balance_does_not_enforce_minimum(self, db_session):
        register(db_session)
        service = AccountService(db_session)

        assert service.adjust_balance("user-1", Decimal("-10")) == Decimal("-10")

    def test_adjust_unknown_account(self, db_session):
        with pytest.raises(NotFound):
            AccountService(db_session).adjust_balance("ghost", Decimal("1"))

    def test_debit_if_sufficient(self, db_session):
        register(db_session)
        service = AccountService(db_session)
        service.adjust_balance("user-1", Decimal("100"))

        assert service.debit_if_sufficient("user-1", Decimal("100")) == Decimal("0")

    def test_debit_if_insufficient_leaves_balance(self, db_session):
        register(db_session)
        service = AccountService(db_session)
        service.adjust_balance("user-1", Decimal("99.99"))

        with pytest.raises(InsufficientBalance, match="available"):
            service.debit_if_sufficient("user-1", Decimal("100"))
        assert service.get_balance("user-1") == Decimal("99.99")

    def test_debit_unknown_account(self, db_session):
        with pytest.raises(NotFound):
            AccountService(db_session).debit_if_sufficient("ghost", Decimal("1"))


class TestStatusAndAdmins:

    def test_suspend_and_reactivate(self, db_session):
        register(db_session)
        service = AccountService(db_session)

        account = service.change_status("user-1", AccountStatus.SUSPENDED, "admin")
        assert account.status == AccountStatus.SUSPENDED

        account = service.change_status("user-1", AccountStatus.ACTIVE, "admin")
        assert account.status == AccountStatus.ACTIVE

    def test_status_change_is_audited_with_actor(self, db_session):
        register(db_session)
        AccountService(db_session).change_status(
            "user-1", AccountStatus.SUSPENDED, "admin"
        )
        db_session.commit()

        entry = (
            db_session.query(AuditLog)
            .filter_by(event_type="AccountStatusChanged")
            .one()
        )
        assert entry.actor_id == "admin"

    def test_grant_admin_is_idempotent(self, db_session):
        service = AccountService(db_session)
        service.grant_admin("admin")
        service.grant_admin("admin")

        assert service.is_admin("admin")
        assert not service.is_admin("user-1")
        assert not service.is_admin(None)

    def test_record_login(self, db_session):
        register(db_session)
        account = AccountService(db_session).record_login("user-1")
        assert account.last_login_at is not None

    def test_record_login_stamps_admin_row(self, db_session):
        register(db_session, "admin")
        service = AccountService(db_session)
        service.grant_admin("admin")

        account = service.record_login("admin")
        db_session.commit()

        admin = db_session.get(Admin, "admin")
        assert admin.last_login_at == account.last_login_at

    def test_record_login_unknown_account(self, db_session):
        with pytest.raises(NotFound):
            AccountService(db_session).record_login("ghost")

    def test_list_accounts(self, db_session):
        register(db_session, "user-1")
        register(db_session, "user-2")
        ids = {a.id for a in AccountService(db_session).list_accounts()}
        assert ids == {"user-1", "user-2"}
