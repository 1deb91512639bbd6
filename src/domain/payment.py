"""Payment Domain Entity

Payments recorded against invoices. Recording a payment never changes the
invoice status; settling is a separate, explicit action.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Iterable, Optional, Tuple
from sqlmodel import Field, Column, Index
from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, IdType
from src.domain.money import ZERO, round2


class Payment(BaseModel, table=True):
    """
    Payment - Money received for an invoice

    Domain Rules:
    - amount > 0 and never more than the invoice balance at recording time
    - invoice_id becomes NULL when the invoice is bulk-deleted
    """

    __tablename__ = "payments"
    __table_args__ = (
        Index('ix_payments_invoice_id', 'invoice_id'),
        Index('ix_payments_client_id', 'client_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique payment identifier (auto-increment)"
    )

    invoice_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True),
        description="Invoice this payment settles"
    )

    client_id: int = Field(
        sa_column=Column(IdType, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        description="Paying client"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Amount received"
    )

    payment_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    payment_method: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Cash, check, bank transfer, ..."
    )

    reference_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
    )

    remarks: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
    )


def summarize_payments(total_amount: Decimal, amounts: Iterable[Decimal]) -> Tuple[Decimal, Decimal]:
    """Return (total_paid, balance) for an invoice total and its payment amounts"""
    total_paid = round2(sum(amounts, ZERO))
    return total_paid, round2(total_amount - total_paid)
