"""Unit tests for GenerateInvoices use case

Tests cover:
- Target validation and configuration errors
- Period selection: horizon, include_future, already-invoiced periods
- Contract dates taking precedence over client dates
- Per-client isolation in bulk runs
- Cooperative cancellation
"""

import asyncio
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.use_cases.billing.dtos import GenerateInvoicesCommandDTO
from src.app.use_cases.billing.generate_invoices import GenerateInvoices, NO_NEW_PERIODS_MESSAGE
from src.domain.billing_period import BillingPeriod
from src.domain.contract import Contract, ContractStatus
from tests.fixtures.factories import make_client, make_company

TODAY = date(2025, 3, 15)


@pytest.fixture
def mock_client_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=make_client())
    repo.get_active_clients = AsyncMock(return_value=[make_client()])
    repo.get_primary_contact = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_contract_repo():
    repo = MagicMock()
    repo.get_latest_active = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()
    repo.get_existing_periods = AsyncMock(return_value=[])
    repo.update = AsyncMock(side_effect=lambda invoice: invoice)
    return repo


@pytest.fixture
def mock_company_repo():
    repo = MagicMock()
    repo.get = AsyncMock(return_value=make_company())
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


@pytest.fixture
def mock_number_allocator():
    """Hands out OFC00000219, OFC00000220, ... and stamps persistence fields"""
    allocator = MagicMock()
    counter = {"next": 219}

    async def create_numbered(invoice):
        invoice.id = counter["next"] - 218
        invoice.invoice_number = f"OFC{counter['next']:08d}"
        invoice.created_at = datetime(2025, 3, 15, 9, 0, 0)
        counter["next"] += 1
        return invoice

    allocator.create_numbered = AsyncMock(side_effect=create_numbered)
    return allocator


@pytest.fixture
def use_case(
    mock_uow,
    mock_client_repo,
    mock_contract_repo,
    mock_invoice_repo,
    mock_company_repo,
    mock_document_writer,
    mock_number_allocator,
):
    return GenerateInvoices(
        uow=mock_uow,
        client_repo=mock_client_repo,
        contract_repo=mock_contract_repo,
        invoice_repo=mock_invoice_repo,
        company_repo=mock_company_repo,
        document_writer=mock_document_writer,
        number_allocator=mock_number_allocator,
        clock=lambda: TODAY,
    )


@pytest.mark.asyncio
class TestGenerateInvoicesValidation:

    async def test_both_targets_rejected(self, use_case):
        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=1, all_clients=True))

        assert result.is_err()
        assert result.error.code == "INVALID_GENERATION_TARGET"

    async def test_no_target_rejected(self, use_case):
        result = await use_case.execute(GenerateInvoicesCommandDTO())

        assert result.is_err()
        assert result.error.code == "INVALID_GENERATION_TARGET"

    async def test_missing_company_profile(self, use_case, mock_company_repo, mock_number_allocator):
        mock_company_repo.get = AsyncMock(return_value=None)

        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=1))

        assert result.is_err()
        assert result.error.code == "COMPANY_NOT_CONFIGURED"
        mock_number_allocator.create_numbered.assert_not_called()

    async def test_missing_client(self, use_case, mock_client_repo):
        mock_client_repo.get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=99))

        assert result.is_err()
        assert result.error.code == "CLIENT_NOT_FOUND"


@pytest.mark.asyncio
class TestGenerateInvoicesSingleClient:

    async def test_generates_every_period_up_to_today(self, use_case, mock_uow):
        """
        Given: Monthly client Jan 1 - Mar 31, today is Mar 15
        When: Generating for the client
        Then: Jan, Feb and Mar invoices are created and committed one by one
        """
        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=1))

        assert result.is_ok()
        response = result.value
        assert response.success is True
        assert response.message == "Generated 3 invoice(s)"
        assert [i.invoice_number for i in response.data] == [
            "OFC00000219",
            "OFC00000220",
            "OFC00000221",
        ]
        assert [i.billing_period_start for i in response.data] == [
            date(2025, 1, 1),
            date(2025, 2, 1),
            date(2025, 3, 1),
        ]
        assert mock_uow.commit.await_count == 3
        assert response.results[0].invoice_ids == [1, 2, 3]

    async def test_amounts_and_due_date(self, use_case):
        result = await use_case.execute(
            GenerateInvoicesCommandDTO(client_id=1, has_withholding_tax=True)
        )

        first = result.value.data[0]
        assert first.amount == Decimal("1000.00")
        assert first.vat_amount == Decimal("120.00")
        assert first.total_amount == Decimal("1120.00")
        assert first.withholding_tax == Decimal("50.00")
        assert first.net_amount == Decimal("1070.00")
        assert first.due_date == date(2024, 12, 29)
        assert first.status == "pending"
        assert first.file_path == "invoices/SERVTRIX/OFC00000219.pdf"

    async def test_horizon_skips_later_periods(self, use_case):
        result = await use_case.execute(
            GenerateInvoicesCommandDTO(client_id=1, up_to_date=date(2025, 2, 10))
        )

        assert len(result.value.data) == 2

    async def test_include_future_generates_remaining_periods(self, use_case):
        result = await use_case.execute(
            GenerateInvoicesCommandDTO(client_id=1, up_to_date=date(2025, 1, 5), include_future=True)
        )

        assert len(result.value.data) == 3

    async def test_already_invoiced_periods_are_skipped(self, use_case, mock_invoice_repo):
        mock_invoice_repo.get_existing_periods = AsyncMock(
            return_value=[BillingPeriod(date(2025, 1, 1), date(2025, 1, 31))]
        )

        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=1))

        assert [i.billing_period_start for i in result.value.data] == [
            date(2025, 2, 1),
            date(2025, 3, 1),
        ]

    async def test_period_overlapping_a_manual_invoice_is_skipped(self, use_case, mock_invoice_repo):
        """
        Given: A hand-made invoice for Jan 1 - Jan 15
        Then: The January period is not billed a second time
        """
        mock_invoice_repo.get_existing_periods = AsyncMock(
            return_value=[BillingPeriod(date(2025, 1, 1), date(2025, 1, 15))]
        )

        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=1, include_future=True))

        assert [(i.billing_period_start, i.billing_period_end) for i in result.value.data] == [
            (date(2025, 2, 1), date(2025, 2, 28)),
            (date(2025, 3, 1), date(2025, 3, 31)),
        ]

    async def test_nothing_new_is_a_successful_no_op(self, use_case, mock_invoice_repo, mock_uow):
        mock_invoice_repo.get_existing_periods = AsyncMock(
            return_value=[
                BillingPeriod(date(2025, 1, 1), date(2025, 1, 31)),
                BillingPeriod(date(2025, 2, 1), date(2025, 2, 28)),
                BillingPeriod(date(2025, 3, 1), date(2025, 3, 31)),
            ]
        )

        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=1))

        assert result.is_ok()
        assert result.value.success is True
        assert result.value.message == NO_NEW_PERIODS_MESSAGE
        assert result.value.data == []
        mock_uow.commit.assert_not_called()

    async def test_active_contract_governs_dates(self, use_case, mock_contract_repo):
        mock_contract_repo.get_latest_active = AsyncMock(
            return_value=Contract(
                id=1,
                contract_number="VO-SA-2025-0001",
                client_id=1,
                start_date=date(2025, 2, 1),
                end_date=date(2025, 4, 30),
                status=ContractStatus.ACTIVE,
            )
        )

        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=1, include_future=True))

        assert [i.billing_period_start for i in result.value.data] == [
            date(2025, 2, 1),
            date(2025, 3, 1),
            date(2025, 4, 1),
        ]

    async def test_failed_period_is_rolled_back_and_reported(
        self, use_case, mock_document_writer, mock_uow
    ):
        async def write(invoice, profile, provider, invoice_date):
            if invoice.billing_period_start == date(2025, 2, 1):
                raise RuntimeError("disk full")
            return f"invoices/{profile.client_code}/{invoice.invoice_number}.pdf"

        mock_document_writer.write = AsyncMock(side_effect=write)

        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=1))

        response = result.value
        assert response.success is False
        assert len(response.data) == 2
        assert "disk full" in response.message
        assert response.message.startswith("Generated 2 invoice(s), ")
        mock_uow.rollback.assert_awaited_once()

    async def test_stored_document_discarded_when_commit_fails(
        self, use_case, mock_uow, mock_document_writer
    ):
        mock_uow.commit = AsyncMock(side_effect=[None, RuntimeError("connection lost"), None])

        result = await use_case.execute(GenerateInvoicesCommandDTO(client_id=1))

        assert len(result.value.data) == 2
        mock_document_writer.discard.assert_awaited_once_with("invoices/SERVTRIX/OFC00000220.pdf")


@pytest.mark.asyncio
class TestGenerateInvoicesBulk:

    @staticmethod
    def _register(mock_client_repo, clients):
        by_id = {client.id: client for client in clients}
        mock_client_repo.get_active_clients = AsyncMock(return_value=clients)
        mock_client_repo.get_by_id = AsyncMock(side_effect=lambda client_id: by_id.get(client_id))
        return clients

    @pytest.fixture
    def two_clients(self, mock_client_repo):
        return self._register(
            mock_client_repo,
            [
                make_client(id=1, client_name="Servtrix Solutions Inc."),
                make_client(id=2, client_name="Northwind Traders"),
            ],
        )

    @pytest.fixture
    def three_clients(self, mock_client_repo):
        return self._register(
            mock_client_repo,
            [
                make_client(id=1, client_name="Servtrix Solutions Inc."),
                make_client(id=2, client_name="Northwind Traders"),
                make_client(id=3, client_name="Zenith Holdings"),
            ],
        )

    async def test_all_clients(self, use_case, two_clients):
        result = await use_case.execute(GenerateInvoicesCommandDTO(all_clients=True))

        response = result.value
        assert response.success is True
        assert len(response.data) == 6
        assert response.message == "Generated 6 invoice(s) for 2 of 2 client(s)"

    async def test_failing_client_does_not_stop_others(
        self, use_case, two_clients, mock_document_writer
    ):
        """
        Given: Rendering always fails for the second client
        Then: The first client's invoices are kept and the failure is reported per client
        """
        async def write(invoice, profile, provider, invoice_date):
            if profile.client_id == 2:
                raise RuntimeError("template error")
            return f"invoices/{profile.client_code}/{invoice.invoice_number}.pdf"

        mock_document_writer.write = AsyncMock(side_effect=write)

        result = await use_case.execute(GenerateInvoicesCommandDTO(all_clients=True))

        response = result.value
        assert response.success is False
        assert len(response.data) == 3
        assert all(i.client_id == 1 for i in response.data)
        assert response.message == "Generated 3 invoice(s) for 1 of 2 client(s), 1 client(s) failed"

        first, second = response.results
        assert first.success is True
        assert second.success is False
        assert "template error" in second.error

    async def test_middle_client_failure_keeps_later_clients(
        self, use_case, three_clients, mock_document_writer
    ):
        """
        Given: Three active clients, rendering fails for the second
        Then: Clients 1 and 3 still get their invoices
        """
        async def write(invoice, profile, provider, invoice_date):
            if profile.client_id == 2:
                raise RuntimeError("template error")
            return f"invoices/{profile.client_code}/{invoice.invoice_number}.pdf"

        mock_document_writer.write = AsyncMock(side_effect=write)

        result = await use_case.execute(GenerateInvoicesCommandDTO(all_clients=True))

        response = result.value
        assert response.success is False
        assert [i.client_id for i in response.data] == [1, 1, 1, 3, 3, 3]
        assert response.message == "Generated 6 invoice(s) for 2 of 3 client(s), 1 client(s) failed"

        first, second, third = response.results
        assert first.success is True
        assert second.success is False
        assert "template error" in second.error
        assert third.success is True
        assert third.client_name == "Zenith Holdings"
        assert len(third.invoice_ids) == 3

    async def test_unreadable_client_is_reported_per_client(
        self, use_case, three_clients, mock_client_repo
    ):
        """
        Given: The second client's contact lookup blows up
        Then: Only that client's result carries the error
        """
        async def get_primary_contact(client_id):
            if client_id == 2:
                raise ValueError("corrupt contact row")
            return None

        mock_client_repo.get_primary_contact = AsyncMock(side_effect=get_primary_contact)

        result = await use_case.execute(GenerateInvoicesCommandDTO(all_clients=True))

        assert result.is_ok()
        response = result.value
        assert [r.success for r in response.results] == [True, False, True]
        assert response.results[1].client_name == "Northwind Traders"
        assert "corrupt contact row" in response.results[1].error
        assert len(response.data) == 6

    async def test_cancellation_stops_before_next_period(
        self, use_case, two_clients, mock_document_writer, mock_contract_repo
    ):
        cancel_event = asyncio.Event()

        async def write(invoice, profile, provider, invoice_date):
            cancel_event.set()
            return f"invoices/{profile.client_code}/{invoice.invoice_number}.pdf"

        mock_document_writer.write = AsyncMock(side_effect=write)

        result = await use_case.execute(
            GenerateInvoicesCommandDTO(all_clients=True), cancel_event=cancel_event
        )

        response = result.value
        assert response.cancelled is True
        assert len(response.data) == 1
        assert len(response.results) == 1
        assert response.message.endswith("(cancelled)")
        mock_contract_repo.get_latest_active.assert_awaited_once_with(1)

    async def test_cancelled_before_start(self, use_case, two_clients, mock_number_allocator):
        cancel_event = asyncio.Event()
        cancel_event.set()

        result = await use_case.execute(
            GenerateInvoicesCommandDTO(all_clients=True), cancel_event=cancel_event
        )

        assert result.value.cancelled is True
        assert result.value.results == []
        mock_number_allocator.create_numbered.assert_not_called()
