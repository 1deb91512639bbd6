"""UpdateInvoiceStatus Use Case

Moves an invoice forward in its lifecycle: pending -> sent -> overdue -> paid.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus, can_transition
from .dtos import InvoiceResponseDTO, UpdateInvoiceStatusCommandDTO
from .get_invoice import invoice_not_found

logger = logging.getLogger(__name__)


class UpdateInvoiceStatus:
    """
    Use Case: Change invoice status

    Business Rules:
    1. Status only moves forward; skipping ahead is allowed
    2. Moving to sent stamps sent_at, moving to paid stamps paid_at
    3. Amounts are never touched
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, command: UpdateInvoiceStatusCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            # Step 1: Load invoice
            invoice = await self.invoice_repo.get_by_id(command.invoice_id)
            if invoice is None:
                return Return.err(invoice_not_found(command.invoice_id))

            # Step 2: Validate transition
            current = InvoiceStatus(invoice.status)
            if not can_transition(current, command.status):
                return Return.err(
                    Error(
                        code="INVALID_STATUS_TRANSITION",
                        message=f"Cannot change invoice {invoice.invoice_number} from "
                                f"{current.value} to {command.status.value}",
                        reason="Invoice status only moves forward",
                    )
                )

            # Step 3: Apply and persist
            invoice.transition_to(command.status)
            invoice = await self.invoice_repo.update(invoice)
            await self.uow.commit()

            logger.info(f"Invoice {invoice.invoice_number} moved from {current.value} to {command.status.value}")
            return Return.ok(InvoiceResponseDTO.from_entity(invoice))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_STATUS_FAILED",
                    message="Failed to update invoice status",
                    reason=str(e),
                )
            )
