"""Invoice API Routes

FastAPI routes for invoice generation, maintenance and documents.
"""

from typing import Callable
from datetime import date

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.billing_request import (
    CreateInvoiceRequestSchema,
    GenerateInvoicesRequestSchema,
    InvoiceIdsRequestSchema,
    SendInvoicesRequestSchema,
    UpdateInvoiceStatusRequestSchema,
)
from src.app.services.invoice_storage import InvoiceStorage
from src.app.services.notification_service import NotificationService
from src.app.services.pdf_service import InvoicePdfService
from src.app.use_cases.billing.dtos import (
    BatchInvoiceOperationResponseDTO,
    CreateInvoiceCommandDTO,
    DeleteInvoicesResponseDTO,
    GenerateInvoicesCommandDTO,
    GenerateInvoicesResponseDTO,
    InvoiceDetailDTO,
    InvoiceIdsCommandDTO,
    InvoiceResponseDTO,
    SendInvoicesCommandDTO,
    UpdateInvoiceStatusCommandDTO,
)
from src.app.use_cases.billing.create_invoice import CreateInvoice
from src.app.use_cases.billing.delete_invoices import DeleteInvoices
from src.app.use_cases.billing.generate_invoices import GenerateInvoices
from src.app.use_cases.billing.get_invoice import GetInvoice, GetInvoiceDocument
from src.app.use_cases.billing.invoice_documents import InvoiceDocumentWriter
from src.app.use_cases.billing.regenerate_invoice_pdfs import RegenerateInvoicePdfs
from src.app.use_cases.billing.send_invoices import SendInvoices
from src.app.use_cases.billing.settle_invoice import SettleInvoice
from src.app.use_cases.billing.update_invoice_status import UpdateInvoiceStatus
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.adapter.repositories.company_repository import SqlAlchemyCompanyRepository
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    build_invoice_number_allocator,
    get_clock,
    get_invoice_storage,
    get_notification_service,
    get_pdf_service,
    get_session,
)
from src.api.error import raise_for_error

router = APIRouter(prefix="/invoices", tags=["Invoices"])

ERROR_STATUS = {
    "CLIENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVOICE_DOCUMENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVOICE_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "INVALID_STATUS_TRANSITION": status.HTTP_409_CONFLICT,
    "INVOICE_BALANCE_OUTSTANDING": status.HTTP_409_CONFLICT,
}

NOT_FOUND_RESPONSE = {
    404: {
        "description": "Invoice not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INVOICE_NOT_FOUND",
                        "message": "Invoice with ID 123 not found"
                    }
                }
            }
        }
    }
}


@router.post(
    "/generate",
    response_model=GenerateInvoicesResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: {
            "description": "Invalid target or company profile missing",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_GENERATION_TARGET",
                            "message": "Provide either client_id or all_clients, not both"
                        }
                    }
                }
            }
        },
        404: {"description": "Client not found"},
    }
)
async def generate_invoices(
    request: GenerateInvoicesRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Callable[[], date] = Depends(get_clock),
    pdf_service: InvoicePdfService = Depends(get_pdf_service),
    storage: InvoiceStorage = Depends(get_invoice_storage),
):
    """
    Generate invoices for every uninvoiced billing period.

    Re-running is safe: periods that already have an invoice are skipped.

    **Request body:**
    - `client_id` / `all_clients`: exactly one is required
    - `up_to_date` (optional): skip periods starting after this date (default: today)
    - `include_future` (optional): generate all remaining periods
    - `has_withholding_tax` (optional): deduct 5% withholding tax

    **Returns:**
    - 200: Batch summary with created invoices and per-client results
    - 400: Invalid target or company profile not configured
    - 404: Client not found
    """
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    use_case = GenerateInvoices(
        uow=SqlAlchemyUnitOfWork(session),
        client_repo=SqlAlchemyClientRepository(session),
        contract_repo=SqlAlchemyContractRepository(session),
        invoice_repo=invoice_repo,
        company_repo=SqlAlchemyCompanyRepository(session),
        document_writer=InvoiceDocumentWriter(pdf_service, storage),
        number_allocator=build_invoice_number_allocator(invoice_repo),
        clock=clock,
    )

    result = await use_case.execute(GenerateInvoicesCommandDTO(**request.model_dump()))
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.post(
    "",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "An invoice of the client already overlaps the period",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_ALREADY_EXISTS",
                            "message": "Invoice already exists for client 1 overlapping period 2025-03-01 to 2025-03-31"
                        }
                    }
                }
            }
        },
        400: {"description": "Period is not one of the client's billing periods"},
        404: {"description": "Client not found"},
    }
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Callable[[], date] = Depends(get_clock),
    pdf_service: InvoicePdfService = Depends(get_pdf_service),
    storage: InvoiceStorage = Depends(get_invoice_storage),
):
    """Create a manual invoice for one of the client's billing periods."""
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    use_case = CreateInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        client_repo=SqlAlchemyClientRepository(session),
        contract_repo=SqlAlchemyContractRepository(session),
        invoice_repo=invoice_repo,
        company_repo=SqlAlchemyCompanyRepository(session),
        document_writer=InvoiceDocumentWriter(pdf_service, storage),
        number_allocator=build_invoice_number_allocator(invoice_repo),
        clock=clock,
    )

    result = await use_case.execute(CreateInvoiceCommandDTO(**request.model_dump()))
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.post(
    "/send",
    response_model=BatchInvoiceOperationResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def send_invoices(
    request: SendInvoicesRequestSchema,
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """Mark invoices as sent and notify their clients. Results are per invoice."""
    use_case = SendInvoices(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        client_repo=SqlAlchemyClientRepository(session),
        notification_service=notification_service,
    )

    result = await use_case.execute(SendInvoicesCommandDTO(**request.model_dump()))
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.post(
    "/regenerate",
    response_model=BatchInvoiceOperationResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def regenerate_invoice_pdfs(
    request: InvoiceIdsRequestSchema,
    session: AsyncSession = Depends(get_session),
    pdf_service: InvoicePdfService = Depends(get_pdf_service),
    storage: InvoiceStorage = Depends(get_invoice_storage),
):
    """Re-render the documents of selected invoices. Amounts are not recomputed."""
    use_case = RegenerateInvoicePdfs(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        client_repo=SqlAlchemyClientRepository(session),
        company_repo=SqlAlchemyCompanyRepository(session),
        document_writer=InvoiceDocumentWriter(pdf_service, storage),
    )

    result = await use_case.execute(InvoiceIdsCommandDTO(**request.model_dump()))
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.delete(
    "",
    response_model=DeleteInvoicesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def delete_invoices(
    request: InvoiceIdsRequestSchema,
    session: AsyncSession = Depends(get_session),
    pdf_service: InvoicePdfService = Depends(get_pdf_service),
    storage: InvoiceStorage = Depends(get_invoice_storage),
):
    """Bulk delete invoices. Their payments are kept and detached."""
    use_case = DeleteInvoices(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        document_writer=InvoiceDocumentWriter(pdf_service, storage),
    )

    result = await use_case.execute(InvoiceIdsCommandDTO(**request.model_dump()))
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.get(
    "/{invoice_id}",
    response_model=InvoiceDetailDTO,
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def get_invoice(
    invoice_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Invoice with total paid and remaining balance."""
    use_case = GetInvoice(
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        client_repo=SqlAlchemyClientRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
    )

    result = await use_case.execute(invoice_id)
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.get(
    "/{invoice_id}/pdf",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "PDF document"
        },
        **NOT_FOUND_RESPONSE,
    }
)
async def download_invoice_pdf(
    invoice_id: int,
    session: AsyncSession = Depends(get_session),
    storage: InvoiceStorage = Depends(get_invoice_storage),
):
    """Download the stored invoice document."""
    use_case = GetInvoiceDocument(SqlAlchemyInvoiceRepository(session), storage)

    result = await use_case.execute(invoice_id)
    raise_for_error(result, ERROR_STATUS)

    filename, content = result.value
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.patch(
    "/{invoice_id}/status",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        **NOT_FOUND_RESPONSE,
        409: {
            "description": "Backward status change",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_STATUS_TRANSITION",
                            "message": "Cannot change invoice OFC00000219 from sent to pending"
                        }
                    }
                }
            }
        },
    }
)
async def update_invoice_status(
    invoice_id: int,
    request: UpdateInvoiceStatusRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Move an invoice forward: pending -> sent -> overdue -> paid."""
    use_case = UpdateInvoiceStatus(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
    )

    result = await use_case.execute(
        UpdateInvoiceStatusCommandDTO(invoice_id=invoice_id, status=request.status)
    )
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.post(
    "/{invoice_id}/settle",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        **NOT_FOUND_RESPONSE,
        409: {"description": "Invoice still has an outstanding balance"},
    }
)
async def settle_invoice(
    invoice_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Mark an invoice paid once its payments cover the total."""
    use_case = SettleInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
    )

    result = await use_case.execute(invoice_id)
    raise_for_error(result, ERROR_STATUS)
    return result.value
