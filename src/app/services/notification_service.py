"""Notification Service Interface

Defines the contract for announcing invoices to clients.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.client import Client
from src.domain.invoice import Invoice


class NotificationService(ABC):
    """
    Abstract notification service for invoice notices

    Implementations can deliver via:
    - Log output
    - Webhook (HTTP POST) to a mailer or CRM
    """

    @abstractmethod
    async def send_invoice_notice(
        self,
        invoice: Invoice,
        client: Client,
        recipient_email: Optional[str] = None,
    ) -> bool:
        """
        Announce an invoice to its client

        Args:
            invoice: Invoice being sent
            client: Owner of the invoice
            recipient_email: Override of the client's billing email

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
