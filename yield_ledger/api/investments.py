"""
Plan and investment API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from yield_ledger.api.deps import (
    get_active_account,
    get_current_account,
    http_error,
)
from yield_ledger.models.account import Account
from yield_ledger.models.base import get_db
from yield_ledger.plans import get_plan, list_plans
from yield_ledger.services.investment_service import InvestmentService
from yield_ledger.schemas.investment import (
    PlanResponse,
    InvestmentOpen,
    InvestmentResponse,
    InvestmentStatsResponse,
    PortfolioResponse,
)

router = APIRouter(tags=["Investments"])


@router.get("/plans", response_model=list[PlanResponse])
def get_plans():
    return list_plans()


@router.post("/investments", response_model=InvestmentResponse, status_code=201)
def open_investment(
    request: InvestmentOpen,
    account: Account = Depends(get_active_account),
    db: Session = Depends(get_db),
):
    """
    Open an investment in a catalog plan.

    The principal is debited immediately. Fails with 400 if the
    balance does not cover it or the amount is below the plan
    minimum, and 409 if the plan is already active.
    """
    service = InvestmentService(db)
    try:
        plan = get_plan(request.plan_id)
        investment = service.open(
            account.id,
            plan.id,
            request.amount if request.amount is not None else plan.min_amount,
            plan.rate,
            plan.duration_days,
        )
        db.commit()
        return investment
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/investments", response_model=PortfolioResponse)
def get_portfolio(
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """
    The current account's investments and totals.

    Active investments are accrued up to now before they are
    returned; matured ones are paid out.
    """
    service = InvestmentService(db)
    try:
        service.accrue_account(account.id)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise http_error(e)

    investments = service.list_for_account(account.id)
    stats = service.investment_stats(account.id)
    return PortfolioResponse(
        investments=[InvestmentResponse.model_validate(i) for i in investments],
        stats=InvestmentStatsResponse.model_validate(stats),
    )
