"""Scheduled Invoice Generation Worker

Generates invoices for every active client, the way the
POST /invoices/generate endpoint does with all_clients=true.
Can be run as a standalone script (e.g. from cron on the 1st of the month).
"""

import asyncio
import logging
import signal
import time
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.adapter.repositories.company_repository import SqlAlchemyCompanyRepository
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing import (
    GenerateInvoices,
    GenerateInvoicesCommandDTO,
    GenerateInvoicesResponseDTO,
    InvoiceDocumentWriter,
)
from src.depends import (
    billing_today,
    build_invoice_number_allocator,
    enable_sqlite_savepoints,
    get_invoice_storage,
    get_pdf_service,
)
from libs.result import Result

logger = logging.getLogger(__name__)


class InvoiceGenerationRunner:
    """
    Background runner for recurring invoice generation

    Features:
    - Processes all active clients sequentially
    - Idempotent: periods already invoiced are skipped on re-runs
    - Cooperative cancellation through an asyncio.Event

    Usage:
        runner = InvoiceGenerationRunner()
        result = await runner.run_once()
        await runner.shutdown()
    """

    def __init__(self, db_uri: Optional[str] = None):
        """
        Initialize the runner

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        if self.engine.dialect.name == "sqlite":
            enable_sqlite_savepoints(self.engine)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("InvoiceGenerationRunner initialized")

    async def run_once(
        self,
        up_to_date: Optional[date] = None,
        include_future: bool = False,
        has_withholding_tax: bool = False,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[GenerateInvoicesResponseDTO]:
        """
        Generate invoices for all active clients once

        Args:
            up_to_date: Horizon (defaults to today on the billing calendar)
            include_future: Generate all remaining contract periods
            has_withholding_tax: Deduct withholding tax
            cancel_event: Stops the run before the next client or period when set

        Returns:
            Result[GenerateInvoicesResponseDTO]
        """
        start_time = time.time()
        logger.info(
            f"Starting invoice generation up to {(up_to_date or billing_today()).isoformat()}"
            f"{' (including future periods)' if include_future else ''}"
        )

        async with self.async_session_factory() as session:
            invoice_repo = SqlAlchemyInvoiceRepository(session)
            use_case = GenerateInvoices(
                uow=SqlAlchemyUnitOfWork(session),
                client_repo=SqlAlchemyClientRepository(session),
                contract_repo=SqlAlchemyContractRepository(session),
                invoice_repo=invoice_repo,
                company_repo=SqlAlchemyCompanyRepository(session),
                document_writer=InvoiceDocumentWriter(get_pdf_service(), get_invoice_storage()),
                number_allocator=build_invoice_number_allocator(invoice_repo),
                clock=billing_today,
            )

            command = GenerateInvoicesCommandDTO(
                all_clients=True,
                up_to_date=up_to_date,
                include_future=include_future,
                has_withholding_tax=has_withholding_tax,
            )
            result = await use_case.execute(command, cancel_event=cancel_event)

        execution_time_ms = int((time.time() - start_time) * 1000)
        if result.is_err():
            logger.error(f"Invoice generation aborted: {result.error.message}")
        else:
            logger.info(f"Invoice generation complete: {result.value.message}, {execution_time_ms}ms")

        return result

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("InvoiceGenerationRunner shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Generate everything due up to today
        python -m src.worker.invoice_generation

        # Generate up to a given date with withholding tax
        python -m src.worker.invoice_generation --up-to 2025-06-30 --withholding
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Recurring Invoice Generation Worker")
    parser.add_argument(
        "--up-to", type=date.fromisoformat, help="Skip periods starting after this date (YYYY-MM-DD)"
    )
    parser.add_argument(
        "--include-future", action="store_true", help="Generate all remaining contract periods"
    )
    parser.add_argument(
        "--withholding", action="store_true", help="Deduct 5%% withholding tax"
    )
    args = parser.parse_args()

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
        loop.add_signal_handler(signal.SIGTERM, cancel_event.set)
    except NotImplementedError:
        logger.debug("Signal handlers not supported on this platform")

    runner = InvoiceGenerationRunner()

    try:
        result = await runner.run_once(
            up_to_date=args.up_to,
            include_future=args.include_future,
            has_withholding_tax=args.withholding,
            cancel_event=cancel_event,
        )
        if result.is_err():
            print(f"Invoice generation failed: {result.error.message}")
            return

        summary = result.value
        print("Invoice generation complete:")
        print(f"  {summary.message}")
        print(f"  Invoices created: {len(summary.data)}")
        for client_result in summary.results:
            if not client_result.success:
                print(f"  {client_result.client_name}: {client_result.error}")
    finally:
        await runner.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
