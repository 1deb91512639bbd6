"""DeleteInvoices Use Case

The only way an invoice is ever removed. Payments survive with their
invoice reference cleared.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import DeleteInvoicesResponseDTO, InvoiceIdsCommandDTO
from .invoice_documents import InvoiceDocumentWriter

logger = logging.getLogger(__name__)


class DeleteInvoices:
    """
    Use Case: Bulk delete invoices

    Business Rules:
    1. All selected invoices are deleted in one transaction
    2. Payments are disconnected (invoice_id = NULL), never deleted
    3. Stored documents are removed after commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        document_writer: InvoiceDocumentWriter,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.document_writer = document_writer

    async def execute(self, command: InvoiceIdsCommandDTO) -> Result[DeleteInvoicesResponseDTO]:
        try:
            invoices = await self.invoice_repo.get_by_ids(command.invoice_ids)
            paths = [invoice.file_path for invoice in invoices if invoice.file_path]

            count = await self.invoice_repo.delete_many([invoice.id for invoice in invoices])
            await self.uow.commit()

            for path in paths:
                await self.document_writer.discard(path)

            logger.info(f"Deleted {count} invoice(s)")
            return Return.ok(
                DeleteInvoicesResponseDTO(
                    success=True,
                    message=f"Deleted {count} invoice(s)",
                    count=count,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_INVOICES_FAILED",
                    message="Failed to delete invoices",
                    reason=str(e),
                )
            )
