"""Invoice document rendering and storage

Builds the printable content of an invoice, renders it through the PDF
service and stores it in the client's folder.

Client and company details are captured into BillingProfile / provider dicts
before any per-period work starts: a rollback expires every ORM instance in
the session, and the async session cannot lazy-load them back.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from src.app.services.invoice_storage import InvoiceStorage, invoice_filename
from src.app.services.pdf_service import InvoiceDocumentDTO, InvoicePdfService
from src.domain.client import BillingTerms, Client
from src.domain.client_contact import ClientContact
from src.domain.company import Company
from src.domain.invoice import Invoice

logger = logging.getLogger(__name__)


def terms_label(client: Client) -> str:
    """Billing terms as printed: the free text for Other, the enum label otherwise"""
    terms = BillingTerms(client.billing_terms)
    if terms == BillingTerms.OTHER and client.custom_billing_terms:
        return client.custom_billing_terms
    return terms.value


def provider_fields(company: Company) -> Dict[str, str]:
    return dict(
        provider_name=company.name,
        provider_address=company.address or "",
        provider_emails=company.emails or "",
        provider_mobiles=company.mobiles or "",
        provider_telephone=company.telephone or "",
    )


@dataclass(frozen=True)
class BillingProfile:
    """Plain snapshot of everything billing needs from a client"""

    client_id: int
    client_name: str
    client_code: str
    rental_rate: Decimal
    vat_inclusive: bool
    billing_terms: str
    terms_label: str
    start_date: date
    end_date: date
    customer: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def of(cls, client: Client, contact: Optional[ClientContact] = None) -> "BillingProfile":
        customer = dict(
            customer_name=client.client_name,
            customer_address=client.address or "",
            customer_email=(contact.email if contact and contact.email else client.email) or "",
            customer_mobile=(contact.mobile if contact and contact.mobile else client.mobile) or "",
            customer_contact_person=contact.contact_person if contact else "",
        )
        return cls(
            client_id=client.id,
            client_name=client.client_name,
            client_code=client.client_code,
            rental_rate=client.rental_rate,
            vat_inclusive=client.vat_inclusive,
            billing_terms=BillingTerms(client.billing_terms).value,
            terms_label=terms_label(client),
            start_date=client.start_date,
            end_date=client.end_date,
            customer=customer,
        )


def build_invoice_document(
    invoice: Invoice,
    profile: BillingProfile,
    provider: Dict[str, str],
    invoice_date: date,
) -> InvoiceDocumentDTO:
    return InvoiceDocumentDTO(
        invoice_number=invoice.invoice_number,
        invoice_date=invoice_date,
        due_date=invoice.due_date,
        amount=invoice.amount,
        vat_amount=invoice.vat_amount,
        total_amount=invoice.total_amount,
        withholding_tax=invoice.withholding_tax,
        net_amount=invoice.net_amount,
        has_withholding_tax=invoice.has_withholding_tax,
        vat_inclusive=profile.vat_inclusive,
        billing_period_start=invoice.billing_period_start,
        billing_period_end=invoice.billing_period_end,
        billing_terms=profile.terms_label,
        **provider,
        **profile.customer,
    )


class InvoiceDocumentWriter:
    """
    Renders an invoice and stores the PDF

    Usage:
        writer = InvoiceDocumentWriter(pdf_service, storage)
        path = await writer.write(invoice, profile, provider, invoice_date)
    """

    def __init__(self, pdf_service: InvoicePdfService, storage: InvoiceStorage):
        self.pdf_service = pdf_service
        self.storage = storage

    async def write(
        self,
        invoice: Invoice,
        profile: BillingProfile,
        provider: Dict[str, str],
        invoice_date: date,
    ) -> str:
        """
        Render and store the invoice document

        Returns:
            Storage path, e.g. invoices/SERVTRIX/OFC00000219.pdf
        """
        document = build_invoice_document(invoice, profile, provider, invoice_date)
        content = self.pdf_service.render_invoice(document)
        path = await self.storage.save(
            invoice_filename(invoice.invoice_number), content, profile.client_code
        )
        logger.debug(f"Stored invoice {invoice.invoice_number} at {path}")
        return path

    async def discard(self, path: Optional[str]) -> None:
        """Remove a stored document after its transaction was rolled back"""
        if not path:
            return
        try:
            await self.storage.delete(path)
        except OSError as e:
            logger.warning(f"Could not remove orphaned invoice document {path}: {e}")
