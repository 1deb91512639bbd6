"""Payment Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.payment import Payment


class PaymentRepository(ABC):
    """Repository interface for Payment persistence"""

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """Create a new payment"""
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[Payment]:
        """Payments of an invoice, newest payment_date first"""
        pass

    @abstractmethod
    async def search(
        self,
        invoice_id: Optional[int] = None,
        client_id: Optional[int] = None,
    ) -> List[Payment]:
        """Payments filtered by invoice and/or client, newest payment_date first"""
        pass
