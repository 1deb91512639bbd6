"""Invoice Domain Entity

Tracks rental invoices, their tax breakdown and payment status.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, IdType


class InvoiceStatus(str, Enum):
    """Invoice status types, in lifecycle order"""
    PENDING = "pending"
    SENT = "sent"
    OVERDUE = "overdue"
    PAID = "paid"


_STATUS_ORDER = {
    InvoiceStatus.PENDING: 0,
    InvoiceStatus.SENT: 1,
    InvoiceStatus.OVERDUE: 2,
    InvoiceStatus.PAID: 3,
}


def can_transition(current: InvoiceStatus, target: InvoiceStatus) -> bool:
    """Status only moves forward; skipping ahead (pending -> paid) is allowed"""
    return _STATUS_ORDER[target] > _STATUS_ORDER[current]


class Invoice(BaseModel, table=True):
    """
    Invoice - Rental invoice for one billing period of a client

    Domain Rules:
    - invoice_number must be unique
    - (client_id, billing_period_start, billing_period_end) never repeats
    - Amount fields are fixed at creation; regeneration only replaces file_path
    - Status transitions only move forward: pending -> sent -> overdue -> paid
    - sent_at and paid_at are set when status changes
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_client_id', 'client_id'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_client_period', 'client_id', 'billing_period_start', 'billing_period_end'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., OFC00000219)"
    )

    client_id: int = Field(
        sa_column=Column(IdType, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Client"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="VAT-exclusive base amount"
    )

    vat_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="VAT amount (12%)"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Base plus VAT"
    )

    withholding_tax: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Creditable withholding tax (5% of base)"
    )

    net_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Total less withholding tax"
    )

    has_withholding_tax: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
    )

    billing_period_start: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Billing period start date"
    )

    billing_period_end: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Billing period end date (inclusive)"
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Payment due date"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.PENDING,
        description="Invoice status (pending, sent, overdue, paid)"
    )

    file_path: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Storage path of the rendered PDF"
    )

    sent_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when invoice was sent"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when invoice was marked paid"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def transition_to(self, target: InvoiceStatus, at: Optional[datetime] = None) -> None:
        """Advance status, stamping sent_at / paid_at. Raises ValueError on a backward move."""
        if not can_transition(self.status, target):
            raise ValueError(
                f"Cannot change invoice {self.invoice_number} from "
                f"{self.status.value} to {target.value}"
            )
        at = at or datetime.utcnow()
        if target == InvoiceStatus.SENT and self.sent_at is None:
            self.sent_at = at
        if target == InvoiceStatus.PAID:
            self.paid_at = at
        self.status = target

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "invoice_number": "OFC00000219",
                "client_id": 1,
                "amount": "1000.00",
                "vat_amount": "120.00",
                "total_amount": "1120.00",
                "withholding_tax": "50.00",
                "net_amount": "1070.00",
                "has_withholding_tax": True,
                "billing_period_start": "2025-03-01",
                "billing_period_end": "2025-03-31",
                "due_date": "2025-02-26",
                "status": "pending",
                "file_path": "invoices/SERVTRIX/OFC00000219.pdf",
                "created_at": "2025-02-20T00:00:00Z"
            }
        }
