"""RecordPayment / ListPayments Use Cases

Payments are recorded against a single invoice. Recording never changes the
invoice status; see SettleInvoice.
"""

import logging
from typing import List, Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.money import round2
from src.domain.payment import Payment, summarize_payments
from .dtos import PaymentResponseDTO, RecordPaymentCommandDTO, RecordPaymentResponseDTO
from .get_invoice import invoice_not_found

logger = logging.getLogger(__name__)


class RecordPayment:
    """
    Use Case: Record a payment for an invoice

    Business Rules:
    1. Amount must be > 0 (validated by the command)
    2. Amount must not exceed the invoice's current balance
    3. client_id is taken from the invoice

    Flow:
    1. Load invoice and its existing payments
    2. Check the balance
    3. Create payment and commit
    4. Return payment with the remaining balance
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

    async def execute(self, command: RecordPaymentCommandDTO) -> Result[RecordPaymentResponseDTO]:
        try:
            # Step 1: Load invoice and existing payments
            invoice = await self.invoice_repo.get_by_id(command.invoice_id)
            if invoice is None:
                return Return.err(invoice_not_found(command.invoice_id))

            payments = await self.payment_repo.get_by_invoice_id(command.invoice_id)
            _, balance = summarize_payments(invoice.total_amount, [p.amount for p in payments])

            # Step 2: Check the balance
            amount = round2(command.amount)
            if amount > balance:
                return Return.err(
                    Error(
                        code="PAYMENT_EXCEEDS_BALANCE",
                        message=f"Payment of {amount} exceeds the balance of {balance} "
                                f"on invoice {invoice.invoice_number}",
                    )
                )

            # Step 3: Create payment
            payment = await self.payment_repo.create(
                Payment(
                    invoice_id=invoice.id,
                    client_id=invoice.client_id,
                    amount=amount,
                    payment_date=command.payment_date,
                    payment_method=command.payment_method,
                    reference_number=command.reference_number,
                    remarks=command.remarks,
                )
            )
            invoice_number = invoice.invoice_number
            total_paid, balance = summarize_payments(
                invoice.total_amount, [p.amount for p in payments] + [amount]
            )

            await self.uow.commit()

            logger.info(f"Recorded payment {payment.id} of {amount} for invoice {invoice_number}")

            # Step 4: Build response
            return Return.ok(
                RecordPaymentResponseDTO(
                    **PaymentResponseDTO.from_entity(payment).model_dump(),
                    invoice_number=invoice_number,
                    total_paid=total_paid,
                    balance=balance,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RECORD_PAYMENT_FAILED",
                    message="Failed to record payment",
                    reason=str(e),
                )
            )


class ListPayments:
    """Use Case: Payments filtered by invoice and/or client"""

    def __init__(self, payment_repo: PaymentRepository):
        self.payment_repo = payment_repo

    async def execute(
        self,
        invoice_id: Optional[int] = None,
        client_id: Optional[int] = None,
    ) -> Result[List[PaymentResponseDTO]]:
        try:
            payments = await self.payment_repo.search(invoice_id=invoice_id, client_id=client_id)
            return Return.ok([PaymentResponseDTO.from_entity(p) for p in payments])
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_PAYMENTS_FAILED",
                    message="Failed to list payments",
                    reason=str(e),
                )
            )
