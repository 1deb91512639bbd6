"""Payment API Routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.billing_request import RecordPaymentRequestSchema
from src.app.use_cases.billing.dtos import (
    PaymentResponseDTO,
    RecordPaymentCommandDTO,
    RecordPaymentResponseDTO,
)
from src.app.use_cases.billing.record_payment import ListPayments, RecordPayment
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.api.error import raise_for_error

router = APIRouter(prefix="/payments", tags=["Payments"])

ERROR_STATUS = {
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


@router.post(
    "",
    response_model=RecordPaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Payment exceeds the invoice balance",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PAYMENT_EXCEEDS_BALANCE",
                            "message": "Payment of 2000.00 exceeds the balance of 1120.00 on invoice OFC00000219"
                        }
                    }
                }
            }
        },
        404: {"description": "Invoice not found"},
    }
)
async def record_payment(
    request: RecordPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Record a payment against an invoice.

    The invoice status is not changed; use POST /invoices/{id}/settle once
    the balance is cleared.

    **Returns:**
    - 201: Payment recorded, with the remaining balance
    - 400: Amount exceeds the current balance
    - 404: Invoice not found
    """
    use_case = RecordPayment(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
    )

    result = await use_case.execute(RecordPaymentCommandDTO(**request.model_dump()))
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.get(
    "",
    response_model=List[PaymentResponseDTO],
    status_code=status.HTTP_200_OK,
)
async def list_payments(
    invoice_id: Optional[int] = Query(default=None, description="Filter by invoice"),
    client_id: Optional[int] = Query(default=None, description="Filter by client"),
    session: AsyncSession = Depends(get_session),
):
    """List payments, newest first."""
    use_case = ListPayments(SqlAlchemyPaymentRepository(session))

    result = await use_case.execute(invoice_id=invoice_id, client_id=client_id)
    raise_for_error(result)
    return result.value
