from .unit_of_work import UnitOfWork
from .pdf_service import InvoicePdfService, InvoiceDocumentDTO
from .invoice_storage import InvoiceStorage
from .notification_service import NotificationService

__all__ = [
    "UnitOfWork",
    "InvoicePdfService",
    "InvoiceDocumentDTO",
    "InvoiceStorage",
    "NotificationService",
]
