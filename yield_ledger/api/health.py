"""
Health check endpoint.

Reports database connectivity and how many investments are
waiting on the accrual engine, so a stalled sweep shows up in
monitoring before users notice missing payouts.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from yield_ledger.config import get_settings
from yield_ledger.models.base import get_db
from yield_ledger.models.enums import InvestmentStatus
from yield_ledger.models.investment import Investment

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Application health, including the database and the number
    of active investments already past maturity.

    A failing database query degrades the status rather than
    erroring.
    """
    settings = get_settings()
    overdue = None
    try:
        db.execute(text("SELECT 1"))
        overdue = db.execute(
            select(func.count(Investment.id)).where(
                Investment.status == InvestmentStatus.ACTIVE,
                Investment.matures_at <= datetime.utcnow(),
            )
        ).scalar()
        db_status = "healthy"
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "yield-ledger",
        "version": settings.APP_VERSION,
        "database": db_status,
        "overdue_investments": overdue,
    }
