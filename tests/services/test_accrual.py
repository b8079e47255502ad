"""
Tests for the pure accrual functions.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

from hypothesis import given, settings
from hypothesis import strategies as st

from yield_ledger.services import accrual

OPENED = datetime(2026, 1, 1, 12, 0, 0)
MATURES = OPENED + timedelta(days=14)
PRINCIPAL = Decimal("2500")
EXPECTED = Decimal("2875")


def profit_at(now):
    return accrual.accrued_profit(PRINCIPAL, EXPECTED, OPENED, MATURES, now)


class TestProgress:

    def test_zero_at_open(self):
        assert accrual.progress(OPENED, MATURES, OPENED) == 0.0

    def test_half_way(self):
        assert accrual.progress(OPENED, MATURES, OPENED + timedelta(days=7)) == 0.5

    def test_clamped_before_open(self):
        assert accrual.progress(OPENED, MATURES, OPENED - timedelta(days=1)) == 0.0

    def test_clamped_after_maturity(self):
        assert accrual.progress(OPENED, MATURES, MATURES + timedelta(days=30)) == 1.0

    def test_zero_length_term_is_complete(self):
        assert accrual.progress(OPENED, OPENED, OPENED) == 1.0


class TestAccruedProfit:

    def test_nothing_at_open(self):
        assert profit_at(OPENED) == Decimal("0")

    def test_half_of_return_at_half_term(self):
        assert profit_at(OPENED + timedelta(days=7)) == Decimal("187.5")

    def test_full_return_at_maturity(self):
        assert profit_at(MATURES) == Decimal("375")

    def test_capped_after_maturity(self):
        assert profit_at(MATURES + timedelta(days=365)) == Decimal("375")

    def test_rounded_down_to_money_precision(self):
        profit = profit_at(OPENED + timedelta(seconds=1))
        assert profit == profit.quantize(accrual.MONEY_QUANTUM)
        assert profit <= Decimal("375")

    def test_zero_rate_accrues_nothing(self):
        profit = accrual.accrued_profit(
            PRINCIPAL, PRINCIPAL, OPENED, MATURES, OPENED + timedelta(days=7)
        )
        assert profit == Decimal("0")

    @settings(max_examples=200)
    @given(
        st.integers(min_value=-86400, max_value=20 * 86400),
        st.integers(min_value=0, max_value=20 * 86400),
    )
    def test_monotonic_and_bounded(self, start, step):
        earlier = profit_at(OPENED + timedelta(seconds=start))
        later = profit_at(OPENED + timedelta(seconds=start + step))

        assert Decimal("0") <= earlier <= later <= EXPECTED - PRINCIPAL


class TestCompute:

    def test_compute_reports_maturity(self):
        investment = SimpleNamespace(
            principal=PRINCIPAL,
            expected_return=EXPECTED,
            opened_at=OPENED,
            matures_at=MATURES,
        )

        halfway = accrual.compute(investment, OPENED + timedelta(days=7))
        assert halfway.progress == 0.5
        assert halfway.accrued_profit == Decimal("187.5")
        assert not halfway.matured

        done = accrual.compute(investment, MATURES)
        assert done.matured
        assert done.accrued_profit == Decimal("375")


class TestRemainingTime:

    def test_completed(self):
        assert accrual.remaining_time(MATURES, MATURES) == "Completed"
        assert accrual.remaining_time(MATURES, MATURES + timedelta(hours=1)) == "Completed"

    def test_days_and_hours(self):
        now = MATURES - timedelta(days=3, hours=5, minutes=10)
        assert accrual.remaining_time(MATURES, now) == "3d 5h remaining"

    def test_hours_only(self):
        now = MATURES - timedelta(hours=7, minutes=59)
        assert accrual.remaining_time(MATURES, now) == "7h remaining"
