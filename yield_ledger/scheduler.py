"""
Periodic accrual sweep.

A daemon thread that wakes every ACCRUAL_SWEEP_INTERVAL_SECONDS,
opens a fresh session and runs InvestmentService.sweep(). The
sweep commits per investment, so stopping the thread between
investments never leaves a half-applied payout behind.
"""

import logging
import threading

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from yield_ledger.services.investment_service import InvestmentService

logger = logging.getLogger(__name__)


class AccrualScheduler:

    def __init__(self, session_factory: sessionmaker, interval_seconds: int):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def run_once(self):
        db = self.session_factory()
        try:
            return InvestmentService(db).sweep()
        except SQLAlchemyError:
            db.rollback()
            logger.error("Accrual sweep aborted", exc_info=True)
            return None
        finally:
            db.close()

    def _loop(self) -> None:
        logger.info(
            "Accrual scheduler started, sweeping every %ss", self.interval_seconds
        )
        while not self._stop.wait(self.interval_seconds):
            self.run_once()
        logger.info("Accrual scheduler stopped")

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="accrual-sweep", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
