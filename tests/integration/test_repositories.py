"""Integration tests for SQLAlchemy repositories against SQLite"""

import pytest
from datetime import date
from decimal import Decimal

from src.adapter.repositories import (
    SqlAlchemyClientRepository,
    SqlAlchemyContractRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPaymentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing.invoice_numbering import InvoiceNumberAllocator
from src.domain.billing_period import BillingPeriod
from src.domain.client import BillingTerms, Client, ClientStatus
from src.domain.client_contact import ClientContact
from src.domain.contract import Contract, ContractStatus
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.numbering import DuplicateNumberError
from src.domain.payment import Payment


async def add_client(session, name="Servtrix Solutions Inc.", status=ClientStatus.ACTIVE) -> Client:
    client = Client(
        client_name=name,
        rental_rate=Decimal("1000.00"),
        billing_terms=BillingTerms.MONTHLY,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 12, 31),
        status=status,
    )
    session.add(client)
    await session.commit()
    return client


def new_invoice(client_id: int, number: str = "", start=date(2025, 1, 1), end=date(2025, 1, 31)) -> Invoice:
    return Invoice(
        invoice_number=number,
        client_id=client_id,
        amount=Decimal("1000.00"),
        vat_amount=Decimal("120.00"),
        total_amount=Decimal("1120.00"),
        net_amount=Decimal("1120.00"),
        billing_period_start=start,
        billing_period_end=end,
        due_date=date(2024, 12, 29),
        status=InvoiceStatus.PENDING,
    )


@pytest.mark.asyncio
class TestInvoiceRepository:

    async def test_periods_and_max_number(self, db_session):
        client = await add_client(db_session)
        repo = SqlAlchemyInvoiceRepository(db_session)
        await repo.create(new_invoice(client.id, "OFC00000219"))
        await repo.create(
            new_invoice(client.id, "OFC00000220", date(2025, 2, 1), date(2025, 2, 28))
        )
        await db_session.commit()

        periods = await repo.get_existing_periods(client.id)

        assert BillingPeriod(date(2025, 2, 1), date(2025, 2, 28)) in periods
        assert len(periods) == 2
        assert await repo.get_max_invoice_number("OFC") == "OFC00000220"
        assert await repo.has_overlapping_period(client.id, date(2025, 1, 1), date(2025, 1, 31)) is True
        assert await repo.has_overlapping_period(client.id, date(2025, 3, 1), date(2025, 3, 31)) is False

    async def test_overlap_on_shared_days(self, db_session):
        """
        Given: An invoice for Jan 1 - Jan 31
        Then: Any period sharing at least one day overlaps it, adjacent ones do not
        """
        client = await add_client(db_session)
        repo = SqlAlchemyInvoiceRepository(db_session)
        await repo.create(new_invoice(client.id, "OFC00000219"))
        await db_session.commit()

        assert await repo.has_overlapping_period(client.id, date(2025, 1, 15), date(2025, 2, 14)) is True
        assert await repo.has_overlapping_period(client.id, date(2024, 12, 1), date(2025, 1, 1)) is True
        assert await repo.has_overlapping_period(client.id, date(2025, 1, 10), date(2025, 1, 20)) is True
        assert await repo.has_overlapping_period(client.id, date(2025, 2, 1), date(2025, 2, 28)) is False
        assert await repo.has_overlapping_period(client.id, date(2024, 12, 1), date(2024, 12, 31)) is False

    async def test_duplicate_number_keeps_transaction_usable(self, db_session):
        """
        Given: OFC00000219 already exists
        When: Another invoice is inserted under the same number
        Then: DuplicateNumberError is raised and the session can still commit
        """
        client = await add_client(db_session)
        repo = SqlAlchemyInvoiceRepository(db_session)
        await repo.create(new_invoice(client.id, "OFC00000219"))
        await db_session.commit()

        with pytest.raises(DuplicateNumberError):
            await repo.create(
                new_invoice(client.id, "OFC00000219", date(2025, 2, 1), date(2025, 2, 28))
            )

        created = await repo.create(
            new_invoice(client.id, "OFC00000220", date(2025, 2, 1), date(2025, 2, 28))
        )
        await db_session.commit()

        assert created.id is not None
        assert await repo.get_max_invoice_number("OFC") == "OFC00000220"

    async def test_allocator_continues_sequence(self, db_session):
        client = await add_client(db_session)
        repo = SqlAlchemyInvoiceRepository(db_session)
        allocator = InvoiceNumberAllocator(repo)

        first = await allocator.create_numbered(new_invoice(client.id))
        second = await allocator.create_numbered(
            new_invoice(client.id, start=date(2025, 2, 1), end=date(2025, 2, 28))
        )
        await db_session.commit()

        assert first.invoice_number == "OFC00000219"
        assert second.invoice_number == "OFC00000220"

    async def test_delete_many_detaches_payments(self, db_session):
        client = await add_client(db_session)
        repo = SqlAlchemyInvoiceRepository(db_session)
        invoice = await repo.create(new_invoice(client.id, "OFC00000219"))
        payment_repo = SqlAlchemyPaymentRepository(db_session)
        payment = await payment_repo.create(
            Payment(
                invoice_id=invoice.id,
                client_id=client.id,
                amount=Decimal("500.00"),
                payment_date=date(2025, 1, 5),
                payment_method="Cash",
            )
        )
        await db_session.commit()
        payment_id = payment.id

        count = await repo.delete_many([invoice.id])
        await db_session.commit()

        assert count == 1
        assert await repo.get_by_id(invoice.id) is None
        remaining = await payment_repo.search(client_id=client.id)
        assert [p.id for p in remaining] == [payment_id]
        assert remaining[0].invoice_id is None


@pytest.mark.asyncio
class TestClientAndContractRepositories:

    async def test_active_clients_only(self, db_session):
        await add_client(db_session, "Northwind Traders")
        await add_client(db_session, "Acme Holdings", status=ClientStatus.INACTIVE)
        await add_client(db_session, "Blue Harbor Inc.")

        clients = await SqlAlchemyClientRepository(db_session).get_active_clients()

        assert [c.client_name for c in clients] == ["Blue Harbor Inc.", "Northwind Traders"]

    async def test_primary_contact_falls_back_to_first(self, db_session):
        client = await add_client(db_session)
        repo = SqlAlchemyClientRepository(db_session)
        await repo.add_contact(ClientContact(client_id=client.id, contact_person="Ana Cruz"))
        await repo.add_contact(ClientContact(client_id=client.id, contact_person="Ben Reyes"))
        await db_session.commit()

        contact = await repo.get_primary_contact(client.id)
        assert contact.contact_person == "Ana Cruz"

        await repo.add_contact(
            ClientContact(client_id=client.id, contact_person="Carla Diaz", is_primary=True)
        )
        await db_session.commit()

        contact = await repo.get_primary_contact(client.id)
        assert contact.contact_person == "Carla Diaz"

    async def test_latest_active_contract(self, db_session):
        client = await add_client(db_session)
        repo = SqlAlchemyContractRepository(db_session)
        await repo.create(
            Contract(
                contract_number="VO-SA-2024-0001",
                client_id=client.id,
                start_date=date(2024, 1, 1),
                end_date=date(2024, 12, 31),
            )
        )
        await repo.create(
            Contract(
                contract_number="VO-SA-2025-0001",
                client_id=client.id,
                start_date=date(2025, 1, 1),
                end_date=date(2025, 12, 31),
            )
        )
        await repo.create(
            Contract(
                contract_number="VO-SA-2025-0002",
                client_id=client.id,
                start_date=date(2025, 6, 1),
                end_date=date(2026, 5, 31),
                status=ContractStatus.TERMINATED,
            )
        )
        await db_session.commit()

        latest = await repo.get_latest_active(client.id)

        assert latest.contract_number == "VO-SA-2025-0001"
        assert await repo.get_max_contract_number("VO-SA-2025-") == "VO-SA-2025-0002"


@pytest.mark.asyncio
class TestUnitOfWork:

    async def test_uncommitted_work_rolled_back_on_exit(self, db_session):
        client = await add_client(db_session)
        client_id = client.id
        repo = SqlAlchemyInvoiceRepository(db_session)

        async with SqlAlchemyUnitOfWork(db_session):
            await repo.create(new_invoice(client_id, "OFC00000219"))

        assert await repo.get_existing_periods(client_id) == []

    async def test_committed_work_survives_exit(self, db_session):
        client = await add_client(db_session)
        repo = SqlAlchemyInvoiceRepository(db_session)

        async with SqlAlchemyUnitOfWork(db_session) as uow:
            await repo.create(new_invoice(client.id, "OFC00000219"))
            await uow.commit()

        assert len(await repo.get_existing_periods(client.id)) == 1
