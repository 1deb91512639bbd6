"""ReportLab PDF Generation Service Implementation

Implements invoice rendering using ReportLab library.
"""

from io import BytesIO
from decimal import Decimal
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import InvoicePdfService, InvoiceDocumentDTO

CURRENCY = "PHP"
DATE_FORMAT = "%B %d, %Y"


def _money(value: Decimal) -> str:
    return f"{CURRENCY} {value:,.2f}"


class ReportLabInvoicePdfService(InvoicePdfService):
    """
    ReportLab implementation of InvoicePdfService

    Single-page A4 invoice: provider header, bill-to block, one line for the
    billing period and the VAT / withholding summary.
    """

    def render_invoice(self, document: InvoiceDocumentDTO) -> bytes:
        """
        Render an invoice PDF

        Args:
            document: Invoice content to print

        Returns:
            PDF document as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=f"Invoice {document.invoice_number}",
        )

        styles = getSampleStyleSheet()
        elements = []

        # Custom styles
        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=20,
            spaceAfter=6,
            textColor=colors.HexColor("#2C3E50"),
        )
        invoice_style = ParagraphStyle(
            "InvoiceStyle",
            parent=styles["Heading2"],
            fontSize=14,
            textColor=colors.HexColor("#2C3E50"),
            spaceAfter=12,
        )
        header_style = ParagraphStyle(
            "HeaderStyle",
            parent=styles["Normal"],
            fontSize=9,
            textColor=colors.HexColor("#7F8C8D"),
        )
        normal_style = ParagraphStyle(
            "NormalStyle",
            parent=styles["Normal"],
            fontSize=10,
        )
        bold_style = ParagraphStyle(
            "BoldStyle",
            parent=styles["Normal"],
            fontSize=10,
            fontName="Helvetica-Bold",
        )

        # Header - provider block
        elements.append(Paragraph(escape(document.provider_name), title_style))
        for line in (
            document.provider_address,
            document.provider_emails,
            document.provider_mobiles,
            document.provider_telephone,
        ):
            if line:
                elements.append(Paragraph(escape(line), header_style))
        elements.append(Spacer(1, 8 * mm))
        elements.append(Paragraph("INVOICE", invoice_style))

        # Invoice details
        invoice_info = [
            ["Invoice Number:", document.invoice_number],
            ["Invoice Date:", document.invoice_date.strftime(DATE_FORMAT)],
            ["Due Date:", document.due_date.strftime(DATE_FORMAT)],
            ["Billing Terms:", document.billing_terms],
        ]
        invoice_table = Table(invoice_info, colWidths=[40 * mm, 100 * mm])
        invoice_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#7F8C8D")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(invoice_table)
        elements.append(Spacer(1, 8 * mm))

        # Bill to
        elements.append(Paragraph("Bill To:", bold_style))
        elements.append(Paragraph(escape(document.customer_name), normal_style))
        for line in (
            document.customer_contact_person,
            document.customer_address,
            document.customer_email,
            document.customer_mobile,
        ):
            if line:
                elements.append(Paragraph(escape(line), normal_style))
        elements.append(Spacer(1, 8 * mm))

        # Line item: the billing period
        period = (
            f"{document.billing_period_start.strftime(DATE_FORMAT)} to "
            f"{document.billing_period_end.strftime(DATE_FORMAT)}"
        )
        line_data = [
            ["Description", "Period", "Amount"],
            ["Virtual office rental", period, _money(document.amount)],
        ]
        line_table = Table(line_data, colWidths=[60 * mm, 75 * mm, 35 * mm])
        line_table.setStyle(
            TableStyle(
                [
                    # Header row
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                    # Data rows
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (-1, 1), (-1, -1), "RIGHT"),
                    # Grid
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        elements.append(line_table)
        elements.append(Spacer(1, 5 * mm))

        # Totals
        vat_label = "VAT (12%, included):" if document.vat_inclusive else "VAT (12%):"
        total_data = [
            ["", "Vatable Amount:", _money(document.amount)],
            ["", vat_label, _money(document.vat_amount)],
            ["", "Total Amount:", _money(document.total_amount)],
        ]
        if document.has_withholding_tax:
            total_data.append(["", "Less Withholding Tax (5%):", _money(document.withholding_tax)])
        total_data.append(["", "Amount Due:", _money(document.net_amount)])

        total_table = Table(total_data, colWidths=[60 * mm, 75 * mm, 35 * mm])
        total_table.setStyle(
            TableStyle(
                [
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("FONTNAME", (1, -1), (-1, -1), "Helvetica-Bold"),
                    ("LINEABOVE", (1, -1), (-1, -1), 1.5, colors.HexColor("#2C3E50")),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(total_table)
        elements.append(Spacer(1, 15 * mm))

        footer_note = Paragraph(
            f"<i>Please settle the amount due on or before "
            f"{document.due_date.strftime(DATE_FORMAT)}.</i>",
            ParagraphStyle(
                "FooterNote",
                parent=styles["Normal"],
                fontSize=9,
                textColor=colors.HexColor("#95A5A6"),
            ),
        )
        elements.append(footer_note)

        # Build PDF
        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes
