"""GetInvoice / GetInvoiceDocument Use Cases

Read-side access to an invoice, its payment balance and its stored PDF.
"""

from typing import Tuple

from libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.invoice_storage import InvoiceStorage, invoice_filename
from src.domain.payment import summarize_payments
from .dtos import InvoiceDetailDTO, invoice_fields


def invoice_not_found(invoice_id: int) -> Error:
    return Error(
        code="INVOICE_NOT_FOUND",
        message=f"Invoice with ID {invoice_id} not found",
    )


class GetInvoice:
    """
    Use Case: Invoice with total paid and remaining balance

    balance = total_amount - sum(payments.amount); it can go negative on
    overpayment and never changes the status by itself.
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        client_repo: ClientRepository,
        payment_repo: PaymentRepository,
    ):
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.payment_repo = payment_repo

    async def execute(self, invoice_id: int) -> Result[InvoiceDetailDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id)
            if invoice is None:
                return Return.err(invoice_not_found(invoice_id))

            client = await self.client_repo.get_by_id(invoice.client_id)
            payments = await self.payment_repo.get_by_invoice_id(invoice_id)
            total_paid, balance = summarize_payments(
                invoice.total_amount, [p.amount for p in payments]
            )

            return Return.ok(
                InvoiceDetailDTO(
                    **invoice_fields(invoice),
                    client_name=client.client_name if client else "",
                    total_paid=total_paid,
                    balance=balance,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_INVOICE_FAILED",
                    message="Failed to retrieve invoice",
                    reason=str(e),
                )
            )


class GetInvoiceDocument:
    """Use Case: Load the stored PDF of an invoice"""

    def __init__(self, invoice_repo: InvoiceRepository, storage: InvoiceStorage):
        self.invoice_repo = invoice_repo
        self.storage = storage

    async def execute(self, invoice_id: int) -> Result[Tuple[str, bytes]]:
        """
        Returns:
            Result[(filename, pdf_bytes)]
        """
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id)
            if invoice is None:
                return Return.err(invoice_not_found(invoice_id))

            if not invoice.file_path:
                return Return.err(
                    Error(
                        code="INVOICE_DOCUMENT_NOT_FOUND",
                        message=f"Invoice {invoice.invoice_number} has no stored document",
                    )
                )

            content = await self.storage.read(invoice.file_path)
            return Return.ok((invoice_filename(invoice.invoice_number), content))

        except FileNotFoundError:
            return Return.err(
                Error(
                    code="INVOICE_DOCUMENT_NOT_FOUND",
                    message=f"Stored document for invoice {invoice_id} is missing",
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_INVOICE_DOCUMENT_FAILED",
                    message="Failed to load invoice document",
                    reason=str(e),
                )
            )
