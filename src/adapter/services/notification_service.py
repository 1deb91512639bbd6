"""Notification Service Implementations

Provides concrete implementations for announcing invoices.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationService
from src.domain.client import Client
from src.domain.invoice import Invoice, InvoiceStatus

logger = logging.getLogger(__name__)


def _recipient(client: Client, recipient_email: Optional[str]) -> str:
    return recipient_email or client.email


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs invoice notices

    Useful for development and testing, or as a fallback.
    """

    async def send_invoice_notice(
        self,
        invoice: Invoice,
        client: Client,
        recipient_email: Optional[str] = None,
    ) -> bool:
        """
        Log invoice notice

        Returns:
            Always True (logging never fails)
        """
        logger.info(
            f"[INVOICE NOTICE] {invoice.invoice_number} to {client.client_name} "
            f"<{_recipient(client, recipient_email)}>, "
            f"Amount due: {invoice.net_amount}, "
            f"Period: {invoice.billing_period_start.isoformat()} - {invoice.billing_period_end.isoformat()}, "
            f"Due: {invoice.due_date.isoformat()}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that posts invoice notices to an HTTP webhook

    The receiving side (mailer, CRM) takes care of delivery.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST notices to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_invoice_notice(
        self,
        invoice: Invoice,
        client: Client,
        recipient_email: Optional[str] = None,
    ) -> bool:
        """
        Send invoice notice via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "invoice_notice",
            "invoice_id": invoice.id,
            "invoice_number": invoice.invoice_number,
            "client_id": client.id,
            "client_name": client.client_name,
            "recipient_email": _recipient(client, recipient_email),
            "status": InvoiceStatus(invoice.status).value,
            "total_amount": str(invoice.total_amount),
            "net_amount": str(invoice.net_amount),
            "billing_period_start": invoice.billing_period_start.isoformat(),
            "billing_period_end": invoice.billing_period_end.isoformat(),
            "due_date": invoice.due_date.isoformat(),
            "file_path": invoice.file_path,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as http_client:
                response = await http_client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for invoice {invoice.invoice_number} to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification for invoice {invoice.invoice_number}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_invoice_notice(
        self,
        invoice: Invoice,
        client: Client,
        recipient_email: Optional[str] = None,
    ) -> bool:
        """
        Send the notice through every configured service

        Returns:
            True only if every service succeeded
        """
        success = True
        for service in self.services:
            try:
                if not await service.send_invoice_notice(invoice, client, recipient_email):
                    success = False
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
                success = False
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
