from datetime import date, datetime
from zoneinfo import ZoneInfo

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.invoice_storage import LocalInvoiceStorage
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.pdf_service import ReportLabInvoicePdfService
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.invoice_storage import InvoiceStorage
from src.app.services.notification_service import NotificationService
from src.app.services.pdf_service import InvoicePdfService
from src.app.use_cases.billing.invoice_numbering import InvoiceNumberAllocator


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy emit BEGIN itself on SQLite

    The sqlite3 driver defers BEGIN to the first DML statement, which breaks
    SAVEPOINT (used for number allocation) inside a transaction.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
if engine.dialect.name == "sqlite":
    enable_sqlite_savepoints(engine)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def billing_today() -> date:
    """Today's date on the billing calendar, independent of the server timezone"""
    return datetime.now(ZoneInfo(ApplicationConfig.BILLING_TIMEZONE)).date()


def get_clock():
    return billing_today


def get_pdf_service() -> InvoicePdfService:
    return ReportLabInvoicePdfService()


def get_invoice_storage() -> InvoiceStorage:
    return LocalInvoiceStorage(ApplicationConfig.INVOICE_STORAGE_DIR)


def get_notification_service() -> NotificationService:
    return create_notification_service(ApplicationConfig.INVOICE_NOTIFICATION_WEBHOOK)


def build_invoice_number_allocator(invoice_repo: InvoiceRepository) -> InvoiceNumberAllocator:
    return InvoiceNumberAllocator(
        invoice_repo,
        prefix=ApplicationConfig.INVOICE_NUMBER_PREFIX,
        width=ApplicationConfig.INVOICE_NUMBER_WIDTH,
        seed=ApplicationConfig.INVOICE_NUMBER_SEED,
        max_retries=ApplicationConfig.NUMBER_ALLOCATION_MAX_RETRIES,
    )
