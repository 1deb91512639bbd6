"""SQLAlchemy Payment Repository Implementation"""

from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment


class SqlAlchemyPaymentRepository(PaymentRepository):
    """
    SQLAlchemy implementation of PaymentRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_invoice_id(self, invoice_id: int) -> List[Payment]:
        return await self.search(invoice_id=invoice_id)

    async def search(
        self,
        invoice_id: Optional[int] = None,
        client_id: Optional[int] = None,
    ) -> List[Payment]:
        """
        Payments filtered by invoice and/or client

        Returns:
            Payments ordered by payment_date (newest first), then ID
        """
        statement = select(Payment)

        if invoice_id is not None:
            statement = statement.where(Payment.invoice_id == invoice_id)
        if client_id is not None:
            statement = statement.where(Payment.client_id == client_id)

        statement = statement.order_by(Payment.payment_date.desc(), Payment.id.desc())

        result = await self.session.execute(statement)
        return list(result.scalars().all())
