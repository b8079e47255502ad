"""
Investment plan catalog.

Plans are fixed offerings. The investment ledger only needs a
plan's rate, term and minimum; it stores a copy of the rate and
term on each investment so later catalog changes never alter an
open position.
"""

from dataclasses import dataclass
from decimal import Decimal

from yield_ledger.exceptions import NotFound, InvalidAmount


@dataclass(frozen=True)
class InvestmentPlan:
    id: str
    name: str
    description: str
    min_amount: Decimal
    rate: Decimal
    duration_days: int
    recommended: bool = False


PLANS: dict[str, InvestmentPlan] = {
    plan.id: plan
    for plan in (
        InvestmentPlan(
            id="starter_plan",
            name="Starter Plan",
            description="Perfect for beginners looking to start their investment journey",
            min_amount=Decimal("500"),
            rate=Decimal("5"),
            duration_days=7,
        ),
        InvestmentPlan(
            id="growth_plan",
            name="Growth Plan",
            description="Designed for investors seeking steady growth and higher returns",
            min_amount=Decimal("2500"),
            rate=Decimal("15"),
            duration_days=14,
            recommended=True,
        ),
        InvestmentPlan(
            id="premium_plan",
            name="Premium Plan",
            description="Our highest tier for serious investors seeking maximum returns",
            min_amount=Decimal("10000"),
            rate=Decimal("30"),
            duration_days=30,
        ),
    )
}


def list_plans() -> list[InvestmentPlan]:
    return list(PLANS.values())


def get_plan(plan_id: str) -> InvestmentPlan:
    plan = PLANS.get(plan_id)
    if plan is None:
        raise NotFound(f"Plan '{plan_id}' not found")
    return plan


def validate_amount(plan: InvestmentPlan, amount: Decimal) -> None:
    if amount < plan.min_amount:
        raise InvalidAmount(
            f"{plan.name} requires at least {plan.min_amount}, got {amount}"
        )
