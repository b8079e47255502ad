"""
Yield Ledger — FastAPI Application.

This is the entry point for the application.
All routers are registered here, and the accrual scheduler is
started and stopped with the application.
"""

import logging

from fastapi import FastAPI

from yield_ledger.config import get_settings
from yield_ledger.logging_config import configure_logging
from yield_ledger.models.base import SessionLocal
from yield_ledger.scheduler import AccrualScheduler
from yield_ledger.api.health import router as health_router
from yield_ledger.api.accounts import router as accounts_router
from yield_ledger.api.transactions import router as transactions_router
from yield_ledger.api.investments import router as investments_router
from yield_ledger.api.admin import router as admin_router

configure_logging()
logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Deposits, fixed-term investments and admin-approved payouts",
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(transactions_router)
app.include_router(investments_router)
app.include_router(admin_router)

scheduler = AccrualScheduler(SessionLocal, settings.ACCRUAL_SWEEP_INTERVAL_SECONDS)


@app.on_event("startup")
def start_scheduler():
    if settings.ACCRUAL_SWEEP_INTERVAL_SECONDS > 0:
        scheduler.start()
    else:
        logger.info("Accrual scheduler disabled; accruing on read only")


@app.on_event("shutdown")
def stop_scheduler():
    scheduler.stop()
