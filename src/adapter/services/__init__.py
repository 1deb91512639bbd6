from .unit_of_work import SqlAlchemyUnitOfWork
from .pdf_service import ReportLabInvoicePdfService
from .invoice_storage import LocalInvoiceStorage
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "ReportLabInvoicePdfService",
    "LocalInvoiceStorage",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
]
