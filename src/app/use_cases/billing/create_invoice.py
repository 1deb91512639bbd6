"""CreateInvoice Use Case

Creates a single invoice for one of the client's scheduled billing periods,
e.g. to bill a period early or with an adjusted amount.
"""

import logging
from datetime import date
from typing import Callable

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.company_repository import CompanyRepository
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.billing_period import BillingPeriod
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.money import calculate_amounts
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO
from .generate_invoices import billing_schedule
from .invoice_documents import BillingProfile, InvoiceDocumentWriter, provider_fields
from .invoice_numbering import InvoiceNumberAllocator

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create a manual invoice for one billing period

    Business Rules:
    1. The period must not overlap any existing invoice of the client
    2. The period must be one of the client's scheduled billing periods
    3. Invoice number comes from the shared OFC sequence
    4. Amount defaults to the client's rental rate and follows its VAT mode
    5. Invoice is created with status=pending and its PDF stored

    Flow:
    1. Load client and company profile
    2. Check for overlapping invoices and the billing schedule
    3. Compute amounts, number and persist the invoice
    4. Render and store the document
    5. Commit transaction
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

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with client, period, due date and optional amount

        Returns:
            Result[InvoiceResponseDTO]: Success with invoice details or error
        """
        path = None
        try:
            # Step 1: Load client and company
            company = await self.company_repo.get()
            if company is None:
                return Return.err(
                    Error(
                        code="COMPANY_NOT_CONFIGURED",
                        message="Company profile is not configured",
                    )
                )

            client = await self.client_repo.get_by_id(command.client_id)
            if client is None:
                return Return.err(
                    Error(
                        code="CLIENT_NOT_FOUND",
                        message=f"Client with ID {command.client_id} not found",
                    )
                )
            contact = await self.client_repo.get_primary_contact(client.id)
            profile = BillingProfile.of(client, contact)

            # Step 2: Check for overlapping invoices and the schedule
            overlaps = await self.invoice_repo.has_overlapping_period(
                client_id=command.client_id,
                billing_period_start=command.billing_period_start,
                billing_period_end=command.billing_period_end,
            )

            if overlaps:
                return Return.err(
                    Error(
                        code="INVOICE_ALREADY_EXISTS",
                        message=f"Invoice already exists for client {command.client_id} "
                                f"overlapping period {command.billing_period_start} to "
                                f"{command.billing_period_end}",
                        reason="Billing periods of a client must not overlap",
                    )
                )

            period = BillingPeriod(command.billing_period_start, command.billing_period_end)
            if period not in await billing_schedule(self.contract_repo, profile):
                return Return.err(
                    Error(
                        code="INVALID_BILLING_PERIOD",
                        message=f"{period} is not a billing period of client {command.client_id}",
                        reason="Manual invoices must follow the client's billing schedule",
                    )
                )

            # Step 3: Compute amounts and persist under a fresh number
            rate = command.amount if command.amount is not None else profile.rental_rate
            amounts = calculate_amounts(rate, profile.vat_inclusive, command.has_withholding_tax)

            invoice = Invoice(
                invoice_number="",
                client_id=command.client_id,
                amount=amounts.base,
                vat_amount=amounts.vat,
                total_amount=amounts.total,
                withholding_tax=amounts.withholding,
                net_amount=amounts.net,
                has_withholding_tax=command.has_withholding_tax,
                billing_period_start=command.billing_period_start,
                billing_period_end=command.billing_period_end,
                due_date=command.due_date,
                status=InvoiceStatus.PENDING,
            )
            invoice = await self.number_allocator.create_numbered(invoice)

            # Step 4: Render and store the document
            path = await self.document_writer.write(
                invoice, profile, provider_fields(company), self.clock()
            )
            invoice.file_path = path
            invoice = await self.invoice_repo.update(invoice)

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(f"Created manual invoice {invoice.invoice_number} for client {command.client_id}")
            return Return.ok(InvoiceResponseDTO.from_entity(invoice))

        except Exception as e:
            await self.uow.rollback()
            await self.document_writer.discard(path)
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
