"""Unit tests for batch invoice operations: send, regenerate, delete"""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.billing.delete_invoices import DeleteInvoices
from src.app.use_cases.billing.dtos import InvoiceIdsCommandDTO, SendInvoicesCommandDTO
from src.app.use_cases.billing.regenerate_invoice_pdfs import RegenerateInvoicePdfs
from src.app.use_cases.billing.send_invoices import SendInvoices
from src.domain.invoice import InvoiceStatus
from tests.fixtures.factories import make_client, make_company, make_invoice


@pytest.fixture
def invoices():
    return {
        1: make_invoice(id=1, invoice_number="OFC00000219"),
        2: make_invoice(
            id=2,
            invoice_number="OFC00000220",
            status=InvoiceStatus.OVERDUE,
            file_path="invoices/SERVTRIX/OFC00000220.pdf",
        ),
    }


@pytest.fixture
def mock_invoice_repo(invoices):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(side_effect=lambda invoice_id: invoices.get(invoice_id))
    repo.get_by_ids = AsyncMock(side_effect=lambda ids: [invoices[i] for i in ids if i in invoices])
    repo.update = AsyncMock(side_effect=lambda invoice: invoice)
    repo.delete_many = AsyncMock(side_effect=lambda ids: len(ids))
    return repo


@pytest.fixture
def mock_client_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=make_client())
    repo.get_primary_contact = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_document_writer():
    writer = MagicMock()
    writer.write = AsyncMock(
        side_effect=lambda invoice, profile, provider, invoice_date:
        f"invoices/{profile.client_code}/{invoice.invoice_number}.pdf"
    )
    writer.discard = AsyncMock()
    return writer


@pytest.mark.asyncio
class TestSendInvoices:

    async def test_pending_invoice_marked_sent(self, mock_uow, mock_invoice_repo, mock_client_repo, invoices):
        notifier = MagicMock()
        notifier.send_invoice_notice = AsyncMock(return_value=True)
        use_case = SendInvoices(mock_uow, mock_invoice_repo, mock_client_repo, notifier)

        result = await use_case.execute(
            SendInvoicesCommandDTO(invoice_ids=[1, 2], recipient_email="ap@servtrix.ph")
        )

        assert result.value.success is True
        assert result.value.message == "Sent 2 of 2 invoice(s)"
        assert invoices[1].status == InvoiceStatus.SENT
        assert invoices[1].sent_at is not None
        assert invoices[2].status == InvoiceStatus.OVERDUE
        assert notifier.send_invoice_notice.await_args.args[2] == "ap@servtrix.ph"

    async def test_undelivered_and_missing_reported(self, mock_uow, mock_invoice_repo, mock_client_repo):
        notifier = MagicMock()
        notifier.send_invoice_notice = AsyncMock(return_value=False)
        use_case = SendInvoices(mock_uow, mock_invoice_repo, mock_client_repo, notifier)

        result = await use_case.execute(SendInvoicesCommandDTO(invoice_ids=[1, 99]))

        response = result.value
        assert response.success is False
        assert response.message == "Sent 0 of 2 invoice(s)"
        assert response.results[0].error == "Notification could not be delivered"
        assert "not found" in response.results[1].error


@pytest.mark.asyncio
class TestRegenerateInvoicePdfs:

    async def test_regenerates_and_keeps_amounts(
        self, mock_uow, mock_invoice_repo, mock_client_repo, mock_document_writer, invoices
    ):
        company_repo = MagicMock()
        company_repo.get = AsyncMock(return_value=make_company(name="Acme Offices (renamed)"))
        invoices[1].file_path = "invoices/OLDCODE/OFC00000219.pdf"
        use_case = RegenerateInvoicePdfs(
            mock_uow, mock_invoice_repo, mock_client_repo, company_repo, mock_document_writer
        )

        result = await use_case.execute(InvoiceIdsCommandDTO(invoice_ids=[1]))

        assert result.value.message == "Regenerated 1 of 1 invoice document(s)"
        assert invoices[1].file_path == "invoices/SERVTRIX/OFC00000219.pdf"
        assert invoices[1].total_amount == make_invoice().total_amount
        _, _, provider, invoice_date = mock_document_writer.write.await_args.args
        assert provider["provider_name"] == "Acme Offices (renamed)"
        assert invoice_date == date(2025, 2, 20)
        mock_document_writer.discard.assert_awaited_once_with("invoices/OLDCODE/OFC00000219.pdf")

    async def test_company_not_configured(
        self, mock_uow, mock_invoice_repo, mock_client_repo, mock_document_writer
    ):
        company_repo = MagicMock()
        company_repo.get = AsyncMock(return_value=None)
        use_case = RegenerateInvoicePdfs(
            mock_uow, mock_invoice_repo, mock_client_repo, company_repo, mock_document_writer
        )

        result = await use_case.execute(InvoiceIdsCommandDTO(invoice_ids=[1]))

        assert result.error.code == "COMPANY_NOT_CONFIGURED"


@pytest.mark.asyncio
class TestDeleteInvoices:

    async def test_deletes_and_discards_documents(self, mock_uow, mock_invoice_repo, mock_document_writer):
        use_case = DeleteInvoices(mock_uow, mock_invoice_repo, mock_document_writer)

        result = await use_case.execute(InvoiceIdsCommandDTO(invoice_ids=[1, 2, 99]))

        assert result.value.count == 2
        assert result.value.message == "Deleted 2 invoice(s)"
        mock_invoice_repo.delete_many.assert_awaited_once_with([1, 2])
        mock_uow.commit.assert_awaited_once()
        assert mock_document_writer.discard.await_count == 2

    async def test_failure_keeps_documents(self, mock_uow, mock_invoice_repo, mock_document_writer):
        mock_invoice_repo.delete_many = AsyncMock(side_effect=Exception("Database error"))
        use_case = DeleteInvoices(mock_uow, mock_invoice_repo, mock_document_writer)

        result = await use_case.execute(InvoiceIdsCommandDTO(invoice_ids=[1]))

        assert result.error.code == "DELETE_INVOICES_FAILED"
        mock_uow.rollback.assert_awaited_once()
        mock_document_writer.discard.assert_not_called()
