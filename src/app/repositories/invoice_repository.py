"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import date
from src.domain.billing_period import BillingPeriod
from src.domain.invoice import Invoice, InvoiceStatus


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Provides access to invoice data for billing operations.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID

        Raises:
            DuplicateNumberError: invoice_number is already taken
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_ids(self, invoice_ids: List[int]) -> List[Invoice]:
        """
        Retrieve several invoices, ordered by invoice number

        Unknown IDs are silently skipped.
        """
        pass

    @abstractmethod
    async def get_by_client_id(
        self,
        client_id: int,
        status: Optional[InvoiceStatus] = None,
    ) -> List[Invoice]:
        """
        Retrieve invoices of a client, ordered by billing period

        Args:
            client_id: Client identifier
            status: Optional filter by status

        Returns:
            List of invoices
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def delete_many(self, invoice_ids: List[int]) -> int:
        """
        Delete invoices, disconnecting (not deleting) their payments

        Returns:
            Number of invoices deleted
        """
        pass

    @abstractmethod
    async def has_overlapping_period(
        self, client_id: int, billing_period_start: date, billing_period_end: date
    ) -> bool:
        """
        Check if any invoice of the client covers a day of the given period

        Used to keep a client's billing periods pairwise non-overlapping.
        """
        pass

    @abstractmethod
    async def get_existing_periods(self, client_id: int) -> List[BillingPeriod]:
        """
        Billing periods already invoiced for a client

        Args:
            client_id: Client identifier

        Returns:
            One BillingPeriod per existing invoice
        """
        pass

    @abstractmethod
    async def get_max_invoice_number(self, prefix: str) -> Optional[str]:
        """
        Highest invoice number starting with prefix

        Numbers are fixed-width, so the lexicographic max is the numeric max.

        Returns:
            The highest number, or None if no invoice exists yet
        """
        pass
