"""PDF Generation Service Interface

Defines the contract for rendering invoice documents.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from pydantic import BaseModel, Field


class InvoiceDocumentDTO(BaseModel):
    """Everything printed on an invoice document"""

    invoice_number: str
    invoice_date: date
    due_date: date

    provider_name: str
    provider_address: str = ""
    provider_emails: str = ""
    provider_mobiles: str = ""
    provider_telephone: str = ""

    customer_name: str
    customer_address: str = ""
    customer_email: str = ""
    customer_mobile: str = ""
    customer_contact_person: str = ""

    amount: Decimal = Field(..., description="VAT-exclusive base")
    vat_amount: Decimal
    total_amount: Decimal
    withholding_tax: Decimal = Decimal("0.00")
    net_amount: Decimal
    has_withholding_tax: bool = False
    vat_inclusive: bool = False

    billing_period_start: date
    billing_period_end: date
    billing_terms: str


class InvoicePdfService(ABC):
    """
    Service interface for PDF generation

    Rendering is opaque to billing: it only needs the bytes back.
    """

    @abstractmethod
    def render_invoice(self, document: InvoiceDocumentDTO) -> bytes:
        """
        Render an invoice PDF

        Args:
            document: Invoice content to print

        Returns:
            PDF document as bytes
        """
        pass
