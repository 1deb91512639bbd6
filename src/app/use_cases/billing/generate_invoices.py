"""GenerateInvoices Use Case

Recurring invoice generation for one client or for every active client.
"""

import asyncio
import logging
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.company_repository import CompanyRepository
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.billing_period import (
    BillingPeriod,
    calculate_due_date,
    contract_range,
    filter_new_periods,
    partition_billing_periods,
)
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.money import calculate_amounts
from .dtos import (
    ClientGenerationResultDTO,
    GenerateInvoicesCommandDTO,
    GenerateInvoicesResponseDTO,
    InvoiceResponseDTO,
)
from .invoice_documents import BillingProfile, InvoiceDocumentWriter, provider_fields
from .invoice_numbering import InvoiceNumberAllocator

logger = logging.getLogger(__name__)

NO_NEW_PERIODS_MESSAGE = "No new billing periods to generate invoices for"


class GenerateInvoices:
    """
    Use Case: Generate invoices for every uninvoiced billing period

    Business Rules:
    1. Exactly one of client_id / all_clients selects the target
    2. A missing company profile or client aborts before any work
    3. The latest active contract governs the date range, else the client's dates
    4. Periods already invoiced are never generated again
    5. Periods starting after up_to_date are skipped unless include_future
    6. Each period is committed on its own; a failing period is rolled back
       and recorded while later periods and clients still run
    7. Clients are processed sequentially; the optional cancel event is
       checked between clients and between periods

    Flow:
    1. Validate the target
    2. Load the company profile and the target clients
    3. For each client: resolve range, partition, filter existing periods
    4. For each new period: amounts, due date, number, persist, render, store, commit
    5. Aggregate per-client results
    """

    def __init__(
        self,
        uow: UnitOfWork,
        client_repo: ClientRepository,
        contract_repo: ContractRepository,
        invoice_repo: InvoiceRepository,
        company_repo: CompanyRepository,
        document_writer: InvoiceDocumentWriter,
        number_allocator: InvoiceNumberAllocator,
        clock: Callable[[], date] = date.today,
    ):
        self.uow = uow
        self.client_repo = client_repo
        self.contract_repo = contract_repo
        self.invoice_repo = invoice_repo
        self.company_repo = company_repo
        self.document_writer = document_writer
        self.number_allocator = number_allocator
        self.clock = clock

    async def execute(
        self,
        command: GenerateInvoicesCommandDTO,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[GenerateInvoicesResponseDTO]:
        """
        Execute invoice generation

        Args:
            command: Target selection, horizon and withholding flag
            cancel_event: When set, the run stops before the next client or period

        Returns:
            Result[GenerateInvoicesResponseDTO]: Batch summary, or a
            configuration error when nothing could be attempted
        """
        # Step 1: Validate target
        if (command.client_id is not None) == command.all_clients:
            return Return.err(
                Error(
                    code="INVALID_GENERATION_TARGET",
                    message="Provide either client_id or all_clients, not both",
                    reason="Exactly one generation target is required",
                )
            )

        try:
            # Step 2: Configuration
            company = await self.company_repo.get()
            if company is None:
                return Return.err(
                    Error(
                        code="COMPANY_NOT_CONFIGURED",
                        message="Company profile is not configured",
                        reason="Invoices cannot be issued without a provider profile",
                    )
                )
            provider = provider_fields(company)

            targets = await self._load_targets(command)
            if targets is None:
                return Return.err(
                    Error(
                        code="CLIENT_NOT_FOUND",
                        message=f"Client with ID {command.client_id} not found",
                    )
                )
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="GENERATE_INVOICES_FAILED",
                    message="Failed to load billing data",
                    reason=str(e),
                )
            )

        today = self.clock()
        up_to_date = command.up_to_date or today

        logger.info(
            f"Generating invoices for {len(targets)} client(s) up to {up_to_date}"
            f"{' including future periods' if command.include_future else ''}"
        )

        # Step 3: Per-client generation
        data: List[InvoiceResponseDTO] = []
        results: List[ClientGenerationResultDTO] = []
        cancelled = False

        for client_id, client_name in targets:
            if _is_cancelled(cancel_event):
                cancelled = True
                break

            result, invoices, cancelled = await self._generate_for_client(
                client_id, client_name, provider, command, up_to_date, today, cancel_event
            )
            results.append(result)
            data.extend(invoices)

            if cancelled:
                break

        # Step 4: Summary
        response = GenerateInvoicesResponseDTO(
            success=all(r.success for r in results),
            message=self._summarize(command, results, data, cancelled),
            data=data,
            results=results,
            cancelled=cancelled,
        )

        logger.info(response.message)
        return Return.ok(response)

    async def _load_targets(self, command: GenerateInvoicesCommandDTO) -> Optional[List[Tuple[int, str]]]:
        """IDs and names of the clients to bill, or None when the requested client is missing"""
        if command.all_clients:
            clients = await self.client_repo.get_active_clients()
        else:
            client = await self.client_repo.get_by_id(command.client_id)
            if client is None:
                return None
            clients = [client]

        return [(client.id, client.client_name) for client in clients]

    async def _load_profile(self, client_id: int) -> BillingProfile:
        """
        Snapshot one client for billing

        The client is read again here because a rollback for an earlier
        client expires every instance loaded before it.
        """
        client = await self.client_repo.get_by_id(client_id)
        if client is None:
            raise LookupError(f"Client with ID {client_id} not found")
        contact = await self.client_repo.get_primary_contact(client_id)
        return BillingProfile.of(client, contact)

    async def _generate_for_client(
        self,
        client_id: int,
        client_name: str,
        provider: Dict[str, str],
        command: GenerateInvoicesCommandDTO,
        up_to_date: date,
        today: date,
        cancel_event: Optional[asyncio.Event],
    ) -> Tuple[ClientGenerationResultDTO, List[InvoiceResponseDTO], bool]:
        created: List[InvoiceResponseDTO] = []
        errors: List[str] = []
        cancelled = False

        try:
            profile = await self._load_profile(client_id)
            periods = await self._pending_periods(profile, up_to_date, command.include_future)
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Could not determine billing periods for client {client_id}: {e}")
            return (
                ClientGenerationResultDTO(
                    client_id=client_id,
                    client_name=client_name,
                    success=False,
                    error=str(e),
                ),
                created,
                cancelled,
            )

        for period in periods:
            if _is_cancelled(cancel_event):
                cancelled = True
                break

            try:
                invoice = await self._issue_invoice(
                    profile, provider, period, command.has_withholding_tax, today
                )
                created.append(InvoiceResponseDTO.from_entity(invoice))
            except Exception as e:
                await self.uow.rollback()
                logger.error(
                    f"Invoice generation failed for client {profile.client_id} "
                    f"period {period}: {e}"
                )
                errors.append(f"{period}: {e}")

        result = ClientGenerationResultDTO(
            client_id=client_id,
            client_name=client_name,
            success=not errors,
            invoice_ids=[invoice.invoice_id for invoice in created],
            error="; ".join(errors) or None,
        )
        return result, created, cancelled

    async def _pending_periods(
        self, profile: BillingProfile, up_to_date: date, include_future: bool
    ) -> List[BillingPeriod]:
        candidates = await billing_schedule(self.contract_repo, profile)
        existing = await self.invoice_repo.get_existing_periods(profile.client_id)
        return filter_new_periods(candidates, existing, up_to_date, include_future)

    async def _issue_invoice(
        self,
        profile: BillingProfile,
        provider: Dict[str, str],
        period: BillingPeriod,
        has_withholding_tax: bool,
        today: date,
    ) -> Invoice:
        """Persist, render and store one invoice, then commit"""
        amounts = calculate_amounts(profile.rental_rate, profile.vat_inclusive, has_withholding_tax)

        invoice = Invoice(
            invoice_number="",
            client_id=profile.client_id,
            amount=amounts.base,
            vat_amount=amounts.vat,
            total_amount=amounts.total,
            withholding_tax=amounts.withholding,
            net_amount=amounts.net,
            has_withholding_tax=has_withholding_tax,
            billing_period_start=period.start,
            billing_period_end=period.end,
            due_date=calculate_due_date(period.start),
            status=InvoiceStatus.PENDING,
        )
        invoice = await self.number_allocator.create_numbered(invoice)

        path = await self.document_writer.write(invoice, profile, provider, today)
        invoice.file_path = path
        try:
            invoice = await self.invoice_repo.update(invoice)
            await self.uow.commit()
        except Exception:
            await self.document_writer.discard(path)
            raise

        logger.info(
            f"Created invoice {invoice.invoice_number} for client {profile.client_id} "
            f"period {period}"
        )
        return invoice

    @staticmethod
    def _summarize(
        command: GenerateInvoicesCommandDTO,
        results: List[ClientGenerationResultDTO],
        data: List[InvoiceResponseDTO],
        cancelled: bool,
    ) -> str:
        failed = [r for r in results if not r.success]

        if not command.all_clients:
            if not data and not failed and not cancelled:
                return NO_NEW_PERIODS_MESSAGE
            message = f"Generated {len(data)} invoice(s)"
            if failed:
                message += f", {failed[0].error}"
        else:
            message = (
                f"Generated {len(data)} invoice(s) for {len(results) - len(failed)} "
                f"of {len(results)} client(s)"
            )
            if failed:
                message += f", {len(failed)} client(s) failed"
        if cancelled:
            message += " (cancelled)"
        return message


def _is_cancelled(cancel_event: Optional[asyncio.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


async def billing_schedule(
    contract_repo: ContractRepository, profile: BillingProfile
) -> List[BillingPeriod]:
    """Every billing period of the client's governing date range"""
    contract = await contract_repo.get_latest_active(profile.client_id)
    if contract is not None:
        start, end = contract_range(contract.start_date, contract.end_date)
    else:
        start, end = contract_range(profile.start_date, profile.end_date)

    return partition_billing_periods(start, end, profile.billing_terms)
