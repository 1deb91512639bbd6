"""RegenerateInvoicePdfs Use Case

Re-renders stored invoice documents, e.g. after the company profile or a
client's address changed. Amounts are never recomputed.
"""

import logging
from typing import List, Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.company_repository import CompanyRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import (
    BatchInvoiceOperationResponseDTO,
    InvoiceIdsCommandDTO,
    InvoiceOperationResultDTO,
)
from .invoice_documents import BillingProfile, InvoiceDocumentWriter, provider_fields

logger = logging.getLogger(__name__)


class RegenerateInvoicePdfs:
    """
    Use Case: Replace the rendered documents of selected invoices

    Business Rules:
    1. Only file_path changes; amounts and status stay as they are
    2. The document keeps the invoice's original issue date
    3. A replaced file at a different path is removed after commit
    4. Each invoice is handled on its own; one failure does not stop the batch
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        client_repo: ClientRepository,
        company_repo: CompanyRepository,
        document_writer: InvoiceDocumentWriter,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.company_repo = company_repo
        self.document_writer = document_writer

    async def execute(self, command: InvoiceIdsCommandDTO) -> Result[BatchInvoiceOperationResponseDTO]:
        try:
            company = await self.company_repo.get()
        except Exception as e:
            return Return.err(
                Error(
                    code="REGENERATE_INVOICES_FAILED",
                    message="Failed to load company profile",
                    reason=str(e),
                )
            )

        if company is None:
            return Return.err(
                Error(
                    code="COMPANY_NOT_CONFIGURED",
                    message="Company profile is not configured",
                )
            )
        provider = provider_fields(company)

        results: List[InvoiceOperationResultDTO] = []
        for invoice_id in command.invoice_ids:
            results.append(await self._regenerate_one(invoice_id, provider))

        regenerated = sum(1 for r in results if r.success)
        return Return.ok(
            BatchInvoiceOperationResponseDTO(
                success=regenerated == len(results),
                message=f"Regenerated {regenerated} of {len(results)} invoice document(s)",
                results=results,
            )
        )

    async def _regenerate_one(self, invoice_id: int, provider) -> InvoiceOperationResultDTO:
        invoice_number = ""
        new_path: Optional[str] = None
        old_path: Optional[str] = None
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id)
            if invoice is None:
                return InvoiceOperationResultDTO(
                    invoice_id=invoice_id,
                    invoice_number=invoice_number,
                    success=False,
                    error=f"Invoice with ID {invoice_id} not found",
                )
            invoice_number = invoice.invoice_number
            old_path = invoice.file_path

            client = await self.client_repo.get_by_id(invoice.client_id)
            contact = await self.client_repo.get_primary_contact(invoice.client_id)
            profile = BillingProfile.of(client, contact)

            new_path = await self.document_writer.write(
                invoice, profile, provider, invoice.created_at.date()
            )
            invoice.file_path = new_path
            await self.invoice_repo.update(invoice)
            await self.uow.commit()

            if old_path and old_path != new_path:
                await self.document_writer.discard(old_path)

            logger.info(f"Regenerated document for invoice {invoice_number}")
            return InvoiceOperationResultDTO(
                invoice_id=invoice_id,
                invoice_number=invoice_number,
                success=True,
            )

        except Exception as e:
            await self.uow.rollback()
            if new_path and new_path != old_path:
                await self.document_writer.discard(new_path)
            logger.error(f"Failed to regenerate document for invoice {invoice_id}: {e}")
            return InvoiceOperationResultDTO(
                invoice_id=invoice_id,
                invoice_number=invoice_number,
                success=False,
                error=str(e),
            )
