"""
Accrual engine — time-proportional profit on an investment.

These functions only read an investment's terms and the current
time. They never touch the database; InvestmentService persists
the result and decides what to do at maturity.

    elapsed  = clamp(now - opened_at, 0, matures_at - opened_at)
    progress = elapsed / (matures_at - opened_at)
    accrued  = progress * (expected_return - principal)

progress is a float. The accrued amount is rounded down to the
money column's precision, so it is non-decreasing in `now` and
never exceeds the capped profit.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_DOWN

MONEY_QUANTUM = Decimal("0.0001")


@dataclass(frozen=True)
class Accrual:
    progress: float
    accrued_profit: Decimal
    matured: bool


def progress(opened_at: datetime, matures_at: datetime, now: datetime) -> float:
    """Fraction of the term elapsed at `now`, clamped to [0, 1]."""
    term = (matures_at - opened_at).total_seconds()
    if term <= 0:
        return 1.0
    elapsed = (now - opened_at).total_seconds()
    elapsed = min(max(elapsed, 0.0), term)
    return elapsed / term


def accrued_profit(
    principal: Decimal,
    expected_return: Decimal,
    opened_at: datetime,
    matures_at: datetime,
    now: datetime,
) -> Decimal:
    cap = expected_return - principal
    fraction = progress(opened_at, matures_at, now)
    if fraction >= 1.0:
        return cap
    profit = (cap * Decimal(str(fraction))).quantize(
        MONEY_QUANTUM, rounding=ROUND_DOWN
    )
    return min(profit, cap)


def compute(investment, now: datetime) -> Accrual:
    """Accrual state of `investment` at `now`."""
    fraction = progress(investment.opened_at, investment.matures_at, now)
    profit = accrued_profit(
        investment.principal,
        investment.expected_return,
        investment.opened_at,
        investment.matures_at,
        now,
    )
    return Accrual(
        progress=fraction,
        accrued_profit=profit,
        matured=fraction >= 1.0,
    )


def remaining_time(matures_at: datetime, now: datetime) -> str:
    """Human-readable time left until maturity."""
    seconds = int((matures_at - now).total_seconds())
    if seconds <= 0:
        return "Completed"

    days, rest = divmod(seconds, 86400)
    hours = rest // 3600
    if days > 0:
        return f"{days}d {hours}h remaining"
    return f"{hours}h remaining"
