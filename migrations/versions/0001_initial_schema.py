"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


account_status = sa.Enum(
    "ACTIVE", "SUSPENDED",
    name="account_status_enum", create_constraint=True,
)
transaction_kind = sa.Enum(
    "DEPOSIT", "WITHDRAW", "INVESTMENT", "PROFIT",
    name="transaction_kind_enum", create_constraint=True,
)
transaction_status = sa.Enum(
    "PENDING", "APPROVED", "REJECTED", "COMPLETED",
    name="transaction_status_enum", create_constraint=True,
)
investment_status = sa.Enum(
    "ACTIVE", "COMPLETED", "CANCELLED",
    name="investment_status_enum", create_constraint=True,
)
payout_status = sa.Enum(
    "PENDING", "COMPLETED",
    name="payout_status_enum", create_constraint=True,
)
stat_metric = sa.Enum(
    "USERS_REGISTERED", "DEPOSITS_APPROVED", "WITHDRAWALS_APPROVED",
    "INVESTMENTS_OPENED", "INVESTMENTS_PAID_OUT", "INVESTMENTS_CANCELLED",
    name="stat_metric_enum", create_constraint=True,
)


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("referral_code", sa.String(length=16), nullable=False),
        sa.Column("referral_count", sa.Integer(), nullable=False),
        sa.Column("referred_by_id", sa.String(length=128), nullable=True),
        sa.Column("balance", sa.Numeric(19, 4), nullable=False),
        sa.Column("status", account_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["referred_by_id"], ["accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(
        "ix_accounts_referral_code", "accounts", ["referral_code"], unique=True
    )
    op.create_index("ix_accounts_created_at", "accounts", ["created_at"])

    op.create_table(
        "admins",
        sa.Column("account_id", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("account_id"),
    )

    op.create_table(
        "investments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("account_id", sa.String(length=128), nullable=False),
        sa.Column("plan_id", sa.String(length=50), nullable=False),
        sa.Column("principal", sa.Numeric(19, 4), nullable=False),
        sa.Column("rate", sa.Numeric(9, 4), nullable=False),
        sa.Column("duration_days", sa.Integer(), nullable=False),
        sa.Column("expected_return", sa.Numeric(19, 4), nullable=False),
        sa.Column("accrued_profit", sa.Numeric(19, 4), nullable=False),
        sa.Column("status", investment_status, nullable=False),
        sa.Column("payout_status", payout_status, nullable=False),
        sa.Column("opened_at", sa.DateTime(), nullable=False),
        sa.Column("matures_at", sa.DateTime(), nullable=False),
        sa.Column("last_accrued_at", sa.DateTime(), nullable=True),
        sa.Column("processed_at", sa.DateTime(), nullable=True),
        sa.Column("processed_by", sa.String(length=128), nullable=True),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_investments_account_id", "investments", ["account_id"])
    op.create_index("ix_investments_status", "investments", ["status"])
    op.create_index("ix_investments_opened_at", "investments", ["opened_at"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("account_id", sa.String(length=128), nullable=False),
        sa.Column("kind", transaction_kind, nullable=False),
        sa.Column("status", transaction_status, nullable=False),
        sa.Column("amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("requested_at", sa.DateTime(), nullable=False),
        sa.Column("processed_at", sa.DateTime(), nullable=True),
        sa.Column("processed_by", sa.String(length=128), nullable=True),
        sa.Column("rejection_reason", sa.String(length=500), nullable=True),
        sa.Column("investment_id", sa.Integer(), nullable=True),
        sa.Column("plan_id", sa.String(length=50), nullable=True),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"]),
        sa.ForeignKeyConstraint(["investment_id"], ["investments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_transactions_account_id", "transactions", ["account_id"]
    )
    op.create_index("ix_transactions_status", "transactions", ["status"])
    op.create_index(
        "ix_transactions_requested_at", "transactions", ["requested_at"]
    )
    op.create_index(
        "ix_transactions_investment_id", "transactions", ["investment_id"]
    )

    op.create_table(
        "daily_stats",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("metric", stat_metric, nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(19, 4), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("day", "metric", name="uq_daily_stats_day_metric"),
    )
    op.create_index("ix_daily_stats_day", "daily_stats", ["day"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_type", sa.String(length=100), nullable=False),
        sa.Column("account_id", sa.String(length=128), nullable=True),
        sa.Column("actor_id", sa.String(length=128), nullable=True),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_account_id", "audit_log", ["account_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_log_account_id", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_daily_stats_day", table_name="daily_stats")
    op.drop_table("daily_stats")
    op.drop_index("ix_transactions_investment_id", table_name="transactions")
    op.drop_index("ix_transactions_requested_at", table_name="transactions")
    op.drop_index("ix_transactions_status", table_name="transactions")
    op.drop_index("ix_transactions_account_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("ix_investments_opened_at", table_name="investments")
    op.drop_index("ix_investments_status", table_name="investments")
    op.drop_index("ix_investments_account_id", table_name="investments")
    op.drop_table("investments")
    op.drop_table("admins")
    op.drop_index("ix_accounts_created_at", table_name="accounts")
    op.drop_index("ix_accounts_referral_code", table_name="accounts")
    op.drop_table("accounts")

    bind = op.get_bind()
    for enum_type in (
        stat_metric, payout_status, investment_status,
        transaction_status, transaction_kind, account_status,
    ):
        enum_type.drop(bind, checkfirst=True)
