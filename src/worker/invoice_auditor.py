"""Invoice Audit Background Worker

Periodically checks every invoice account against the ledger invariants.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.app.use_cases.ledger import AuditInvoices, AuditResultDTO
from src.domain.account import Rent

logger = logging.getLogger(__name__)


class InvoiceAuditorWorker:
    """
    Background worker for invoice account audits

    Features:
    - Decodes every program-owned account and checks its invariants
    - Logs violations for investigation
    - Can run once or continuously
    - Configurable interval (default: AUDIT_INTERVAL_SECONDS)

    Usage:
        worker = InvoiceAuditorWorker()
        result = await worker.run_once()

        await worker.run_forever(interval_seconds=3600)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        program_id: Optional[str] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            program_id: Ledger program id (defaults to ApplicationConfig.PROGRAM_ID)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.program_id = program_id or ApplicationConfig.PROGRAM_ID
        self.rent = Rent(
            lamports_per_byte_year=ApplicationConfig.RENT_LAMPORTS_PER_BYTE_YEAR,
            exemption_threshold=ApplicationConfig.RENT_EXEMPTION_THRESHOLD,
        )

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("InvoiceAuditorWorker initialized")

    async def run_once(self) -> AuditResultDTO:
        """
        Run the audit once

        Returns:
            AuditResultDTO with audit results
        """
        if not ApplicationConfig.AUDIT_ENABLED:
            logger.info("Invoice audit is disabled, skipping")
            return AuditResultDTO(
                total_accounts_checked=0,
                violations_found=0,
                violations=[],
                audit_time=datetime.now(timezone.utc),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = AuditInvoices(
                account_repo=SqlAlchemyAccountRepository(session),
                program_id=self.program_id,
                rent=self.rent,
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Invoice audit failed: {result.error.message}")
                raise RuntimeError(f"Invoice audit failed: {result.error.message}")

            response = result.value

            if response.violations_found > 0:
                logger.error(
                    f"ALERT: {response.violations_found} invoice invariant violations found!"
                )
                for v in response.violations:
                    logger.error(f"  - {v.address} (creator={v.creator}): {v.violation}")

            return response

    async def run_forever(self, interval_seconds: Optional[int] = None):
        """
        Run the audit continuously at the given interval

        Args:
            interval_seconds: Seconds between runs (default: AUDIT_INTERVAL_SECONDS)
        """
        interval_seconds = interval_seconds or ApplicationConfig.AUDIT_INTERVAL_SECONDS
        logger.info(f"Starting continuous invoice audit with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Audit cycle complete. "
                    f"Checked {result.total_accounts_checked} accounts, "
                    f"found {result.violations_found} violations "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Audit cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("InvoiceAuditorWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.invoice_auditor --once
        python -m src.worker.invoice_auditor --interval 600
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Invoice Audit Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=None,
        help="Interval between runs in seconds (default: AUDIT_INTERVAL_SECONDS)"
    )
    args = parser.parse_args()

    worker = InvoiceAuditorWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Invoice audit complete:")
            print(f"  Accounts checked: {result.total_accounts_checked}")
            print(f"  Violations found: {result.violations_found}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for v in result.violations:
                print(f"  - {v.address}: {v.violation}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
