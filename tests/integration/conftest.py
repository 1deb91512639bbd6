from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401
from src.adapter.services.invoice_storage import LocalInvoiceStorage
from src.app.services.notification_service import NotificationService
from src.app.services.pdf_service import InvoicePdfService
from src.depends import (
    enable_sqlite_savepoints,
    get_clock,
    get_invoice_storage,
    get_notification_service,
    get_pdf_service,
    get_session,
)

TODAY = date(2025, 3, 15)
FAKE_PDF = b"%PDF-1.4 test document"


class FakePdfService(InvoicePdfService):
    """Records rendered documents instead of running ReportLab"""

    content = FAKE_PDF

    def __init__(self):
        self.documents = []

    def render_invoice(self, document) -> bytes:
        self.documents.append(document)
        return self.content


class RecordingNotificationService(NotificationService):
    def __init__(self):
        self.sent = []

    async def send_invoice_notice(self, invoice, client, recipient_email=None) -> bool:
        self.sent.append((invoice.invoice_number, recipient_email or client.email))
        return True


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Create an in-memory SQLite engine shared by every session of a test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_savepoints(engine)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def pdf_service():
    return FakePdfService()


@pytest_asyncio.fixture
def storage(tmp_path):
    return LocalInvoiceStorage(tmp_path)


@pytest_asyncio.fixture
def notifications():
    return RecordingNotificationService()


@pytest_asyncio.fixture
async def client(db_session, pdf_service, storage, notifications):
    """Create test client with database, document and clock overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_clock] = lambda: (lambda: TODAY)
    app.dependency_overrides[get_pdf_service] = lambda: pdf_service
    app.dependency_overrides[get_invoice_storage] = lambda: storage
    app.dependency_overrides[get_notification_service] = lambda: notifications

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
