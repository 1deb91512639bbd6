"""Unit tests for RecordPayment and ListPayments use cases"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.billing.dtos import RecordPaymentCommandDTO
from src.app.use_cases.billing.record_payment import ListPayments, RecordPayment
from src.domain.invoice import InvoiceStatus
from tests.fixtures.factories import make_invoice, make_payment


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=make_invoice(client_id=7))
    return repo


@pytest.fixture
def mock_payment_repo():
    repo = MagicMock()
    repo.get_by_invoice_id = AsyncMock(return_value=[make_payment(amount=Decimal("500.00"))])

    async def create(payment):
        payment.id = 2
        return payment

    repo.create = AsyncMock(side_effect=create)
    return repo


@pytest.fixture
def record_payment(mock_uow, mock_invoice_repo, mock_payment_repo):
    return RecordPayment(mock_uow, mock_invoice_repo, mock_payment_repo)


def payment_command(amount: str) -> RecordPaymentCommandDTO:
    return RecordPaymentCommandDTO(
        invoice_id=1,
        amount=Decimal(amount),
        payment_date=date(2025, 3, 5),
        payment_method="Bank transfer",
        reference_number="BDO-000123",
    )


@pytest.mark.asyncio
class TestRecordPayment:

    async def test_partial_payment(self, record_payment, mock_uow, mock_payment_repo, mock_invoice_repo):
        """
        Given: Invoice total 1120.00 with 500.00 already paid
        When: 300.00 is recorded
        Then: Balance drops to 320.00 and the invoice status is untouched
        """
        result = await record_payment.execute(payment_command("300.00"))

        assert result.is_ok()
        payment = result.value
        assert payment.payment_id == 2
        assert payment.client_id == 7
        assert payment.invoice_number == "OFC00000219"
        assert payment.total_paid == Decimal("800.00")
        assert payment.balance == Decimal("320.00")
        mock_uow.commit.assert_awaited_once()
        assert mock_invoice_repo.get_by_id.return_value.status == InvoiceStatus.PENDING

    async def test_exact_balance_accepted(self, record_payment):
        result = await record_payment.execute(payment_command("620.00"))

        assert result.value.balance == Decimal("0.00")

    async def test_overpayment_rejected(self, record_payment, mock_payment_repo):
        result = await record_payment.execute(payment_command("620.01"))

        assert result.is_err()
        assert result.error.code == "PAYMENT_EXCEEDS_BALANCE"
        mock_payment_repo.create.assert_not_called()

    async def test_invoice_not_found(self, record_payment, mock_invoice_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=None)

        result = await record_payment.execute(payment_command("100.00"))

        assert result.error.code == "INVOICE_NOT_FOUND"

    async def test_database_error_rolls_back(self, record_payment, mock_uow):
        mock_uow.commit = AsyncMock(side_effect=Exception("Database error"))

        result = await record_payment.execute(payment_command("100.00"))

        assert result.error.code == "RECORD_PAYMENT_FAILED"
        mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
class TestListPayments:

    async def test_filters_passed_through(self, mock_payment_repo):
        mock_payment_repo.search = AsyncMock(return_value=[make_payment()])

        result = await ListPayments(mock_payment_repo).execute(client_id=1)

        assert result.is_ok()
        assert len(result.value) == 1
        assert result.value[0].payment_method == "Bank transfer"
        mock_payment_repo.search.assert_awaited_once_with(invoice_id=None, client_id=1)
