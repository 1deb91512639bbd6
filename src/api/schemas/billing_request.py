"""Request schemas for Billing API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from src.domain.invoice import InvoiceStatus


class GenerateInvoicesRequestSchema(BaseModel):
    """
    Request schema for recurring invoice generation

    Used for POST /invoices/generate endpoint.
    """

    client_id: Optional[int] = Field(
        default=None,
        description="Generate for this client only"
    )

    all_clients: bool = Field(
        default=False,
        description="Generate for every active client"
    )

    up_to_date: Optional[date] = Field(
        default=None,
        description="Skip periods starting after this date (default: today)"
    )

    include_future: bool = Field(
        default=False,
        description="Generate all remaining periods of the contract"
    )

    has_withholding_tax: bool = Field(
        default=False,
        description="Deduct 5% withholding tax"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": 1,
                "up_to_date": "2025-06-30",
                "has_withholding_tax": True
            }
        }


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for a manual invoice

    Used for POST /invoices endpoint.
    """

    client_id: int = Field(..., description="Client to bill")
    billing_period_start: date
    billing_period_end: date
    due_date: date
    amount: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Override of the client's rental rate (same VAT mode)"
    )
    has_withholding_tax: bool = False

    @model_validator(mode="after")
    def check_period(self):
        if self.billing_period_end < self.billing_period_start:
            raise ValueError("billing_period_end must not be before billing_period_start")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": 1,
                "billing_period_start": "2025-03-01",
                "billing_period_end": "2025-03-31",
                "due_date": "2025-02-26",
                "has_withholding_tax": False
            }
        }


class UpdateInvoiceStatusRequestSchema(BaseModel):
    status: InvoiceStatus = Field(..., description="Target status (forward only)")


class InvoiceIdsRequestSchema(BaseModel):
    invoice_ids: List[int] = Field(..., min_length=1, description="Selected invoices")


class SendInvoicesRequestSchema(InvoiceIdsRequestSchema):
    recipient_email: Optional[str] = Field(
        default=None,
        description="Override of the client's billing email"
    )


class RecordPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /payments endpoint.
    """

    invoice_id: int = Field(..., description="Invoice being paid")

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount received (must be > 0)"
    )

    payment_date: date

    payment_method: str = Field(
        ...,
        min_length=1,
        description="Cash, check, bank transfer, ..."
    )

    reference_number: Optional[str] = None

    remarks: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": 1,
                "amount": "1070.00",
                "payment_date": "2025-03-05",
                "payment_method": "Bank transfer",
                "reference_number": "BDO-000123"
            }
        }
