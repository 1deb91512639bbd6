"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from datetime import date, datetime
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.billing_period import BillingPeriod
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.numbering import DuplicateNumberError
from src.domain.payment import Payment


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        The insert runs in a savepoint so a number collision only undoes
        this insert, not the caller's transaction.

        Raises:
            DuplicateNumberError: invoice_number is already taken
        """
        try:
            async with self.session.begin_nested():
                self.session.add(invoice)
                await self.session.flush()
        except IntegrityError as e:
            if await self._number_taken(invoice.invoice_number):
                raise DuplicateNumberError(invoice.invoice_number) from e
            raise

        await self.session.refresh(invoice)
        return invoice

    async def _number_taken(self, invoice_number: str) -> bool:
        statement = (
            select(func.count())
            .select_from(Invoice)
            .where(Invoice.invoice_number == invoice_number)
        )
        result = await self.session.execute(statement)
        return result.scalar_one() > 0

    async def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        statement = select(Invoice).where(Invoice.id == invoice_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_ids(self, invoice_ids: List[int]) -> List[Invoice]:
        if not invoice_ids:
            return []
        statement = (
            select(Invoice)
            .where(Invoice.id.in_(invoice_ids))
            .order_by(Invoice.invoice_number)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_client_id(
        self,
        client_id: int,
        status: Optional[InvoiceStatus] = None,
    ) -> List[Invoice]:
        """
        Retrieve invoices of a client

        Args:
            client_id: Client identifier
            status: Optional filter by status

        Returns:
            Invoices ordered by billing period start
        """
        statement = select(Invoice).where(Invoice.client_id == client_id)

        if status:
            statement = statement.where(Invoice.status == status)

        statement = statement.order_by(Invoice.billing_period_start)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def delete_many(self, invoice_ids: List[int]) -> int:
        if not invoice_ids:
            return 0

        # Keep payment history: detach instead of cascading
        await self.session.execute(
            update(Payment)
            .where(Payment.invoice_id.in_(invoice_ids))
            .values(invoice_id=None)
        )
        result = await self.session.execute(
            delete(Invoice).where(Invoice.id.in_(invoice_ids))
        )
        await self.session.flush()
        return result.rowcount

    async def has_overlapping_period(
        self, client_id: int, billing_period_start: date, billing_period_end: date
    ) -> bool:
        """
        Check if any invoice of the client overlaps the given billing period

        Args:
            client_id: Client identifier
            billing_period_start: Start of billing period (inclusive)
            billing_period_end: End of billing period (inclusive)

        Returns:
            True if an overlapping invoice exists, False otherwise
        """
        statement = (
            select(func.count())
            .select_from(Invoice)
            .where(Invoice.client_id == client_id)
            .where(Invoice.billing_period_start <= billing_period_end)
            .where(Invoice.billing_period_end >= billing_period_start)
        )
        result = await self.session.execute(statement)
        count = result.scalar_one()
        return count > 0

    async def get_existing_periods(self, client_id: int) -> List[BillingPeriod]:
        statement = (
            select(Invoice.billing_period_start, Invoice.billing_period_end)
            .where(Invoice.client_id == client_id)
            .order_by(Invoice.billing_period_start)
        )
        result = await self.session.execute(statement)
        return [BillingPeriod(start=start, end=end) for start, end in result.all()]

    async def get_max_invoice_number(self, prefix: str) -> Optional[str]:
        """
        Highest invoice number with the given prefix

        Numbers are fixed-width, so the string max is the numeric max.
        """
        statement = (
            select(func.max(Invoice.invoice_number))
            .where(Invoice.invoice_number.like(f"{prefix}%"))
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()
