"""SettleInvoice Use Case

Recording payments never changes an invoice's status. Settling is the
explicit action that marks a fully paid invoice as paid.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.invoice import InvoiceStatus
from src.domain.money import ZERO
from src.domain.payment import summarize_payments
from .dtos import InvoiceResponseDTO
from .get_invoice import invoice_not_found

logger = logging.getLogger(__name__)


class SettleInvoice:
    """
    Use Case: Mark an invoice paid once its balance is cleared

    Business Rules:
    1. balance = total_amount - sum(payments) must be <= 0
    2. An invoice that is already paid cannot be settled again
    3. paid_at is stamped by the transition
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo

    async def execute(self, invoice_id: int) -> Result[InvoiceResponseDTO]:
        try:
            # Step 1: Load invoice
            invoice = await self.invoice_repo.get_by_id(invoice_id)
            if invoice is None:
                return Return.err(invoice_not_found(invoice_id))

            if InvoiceStatus(invoice.status) == InvoiceStatus.PAID:
                return Return.err(
                    Error(
                        code="INVALID_STATUS_TRANSITION",
                        message=f"Invoice {invoice.invoice_number} is already paid",
                    )
                )

            # Step 2: Check the balance
            payments = await self.payment_repo.get_by_invoice_id(invoice_id)
            _, balance = summarize_payments(invoice.total_amount, [p.amount for p in payments])

            if balance > ZERO:
                return Return.err(
                    Error(
                        code="INVOICE_BALANCE_OUTSTANDING",
                        message=f"Invoice {invoice.invoice_number} still has a balance of {balance}",
                        reason="Only fully paid invoices can be settled",
                    )
                )

            # Step 3: Transition to paid
            invoice.transition_to(InvoiceStatus.PAID)
            invoice = await self.invoice_repo.update(invoice)
            await self.uow.commit()

            logger.info(f"Invoice {invoice.invoice_number} settled")
            return Return.ok(InvoiceResponseDTO.from_entity(invoice))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SETTLE_INVOICE_FAILED",
                    message="Failed to settle invoice",
                    reason=str(e),
                )
            )
