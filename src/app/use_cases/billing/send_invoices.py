"""SendInvoices Use Case

Marks invoices as sent and announces them to their clients.
"""

import logging
from typing import List

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.notification_service import NotificationService
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus
from .dtos import (
    BatchInvoiceOperationResponseDTO,
    InvoiceOperationResultDTO,
    SendInvoicesCommandDTO,
)

logger = logging.getLogger(__name__)


class SendInvoices:
    """
    Use Case: Send invoices to clients

    Business Rules:
    1. A pending invoice moves to sent and gets sent_at stamped
    2. Invoices already past pending keep their status; the notice is re-sent
    3. The status change is committed before the notice goes out
    4. Each invoice is handled on its own; one failure does not stop the batch
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        client_repo: ClientRepository,
        notification_service: NotificationService,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.notification_service = notification_service

    async def execute(self, command: SendInvoicesCommandDTO) -> Result[BatchInvoiceOperationResponseDTO]:
        results: List[InvoiceOperationResultDTO] = []

        for invoice_id in command.invoice_ids:
            results.append(await self._send_one(invoice_id, command.recipient_email))

        sent = sum(1 for r in results if r.success)
        return Return.ok(
            BatchInvoiceOperationResponseDTO(
                success=sent == len(results),
                message=f"Sent {sent} of {len(results)} invoice(s)",
                results=results,
            )
        )

    async def _send_one(self, invoice_id: int, recipient_email) -> InvoiceOperationResultDTO:
        invoice_number = ""
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

            client = await self.client_repo.get_by_id(invoice.client_id)

            if InvoiceStatus(invoice.status) == InvoiceStatus.PENDING:
                invoice.transition_to(InvoiceStatus.SENT)
                invoice = await self.invoice_repo.update(invoice)
                await self.uow.commit()

            delivered = await self.notification_service.send_invoice_notice(
                invoice, client, recipient_email
            )
            if not delivered:
                return InvoiceOperationResultDTO(
                    invoice_id=invoice_id,
                    invoice_number=invoice_number,
                    success=False,
                    error="Notification could not be delivered",
                )

            return InvoiceOperationResultDTO(
                invoice_id=invoice_id,
                invoice_number=invoice_number,
                success=True,
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to send invoice {invoice_id}: {e}")
            return InvoiceOperationResultDTO(
                invoice_id=invoice_id,
                invoice_number=invoice_number,
                success=False,
                error=str(e),
            )
