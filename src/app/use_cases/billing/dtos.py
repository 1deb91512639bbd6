"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from src.domain.client import BillingTerms, Client, ClientStatus
from src.domain.contract import Contract, ContractStatus
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.payment import Payment


# --- Invoice generation ------------------------------------------------------


class GenerateInvoicesCommandDTO(BaseModel):
    """
    Command DTO for recurring invoice generation

    Exactly one of client_id / all_clients selects the target.
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
        description="Generate every remaining period of the contract, ignoring up_to_date"
    )

    has_withholding_tax: bool = Field(
        default=False,
        description="Deduct 5% creditable withholding tax on the generated invoices"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": 1,
                "up_to_date": "2025-06-30",
                "include_future": False,
                "has_withholding_tax": True
            }
        }


class InvoiceResponseDTO(BaseModel):
    """Invoice as returned by billing use cases"""

    invoice_id: int
    invoice_number: str
    client_id: int
    amount: Decimal = Field(..., description="VAT-exclusive base amount")
    vat_amount: Decimal
    total_amount: Decimal
    withholding_tax: Decimal
    net_amount: Decimal
    has_withholding_tax: bool
    billing_period_start: date
    billing_period_end: date
    due_date: date
    status: str
    file_path: Optional[str] = None
    sent_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, invoice: Invoice) -> "InvoiceResponseDTO":
        return cls(**invoice_fields(invoice))

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": 1,
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


def invoice_fields(invoice: Invoice) -> dict:
    return dict(
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        client_id=invoice.client_id,
        amount=invoice.amount,
        vat_amount=invoice.vat_amount,
        total_amount=invoice.total_amount,
        withholding_tax=invoice.withholding_tax,
        net_amount=invoice.net_amount,
        has_withholding_tax=invoice.has_withholding_tax,
        billing_period_start=invoice.billing_period_start,
        billing_period_end=invoice.billing_period_end,
        due_date=invoice.due_date,
        status=InvoiceStatus(invoice.status).value,
        file_path=invoice.file_path,
        sent_at=invoice.sent_at,
        paid_at=invoice.paid_at,
        created_at=invoice.created_at,
    )


class ClientGenerationResultDTO(BaseModel):
    """Outcome of invoice generation for one client of a batch"""

    client_id: int
    client_name: str
    success: bool
    invoice_ids: List[int] = Field(default_factory=list)
    error: Optional[str] = None


class GenerateInvoicesResponseDTO(BaseModel):
    """
    Response DTO for invoice generation

    data holds every invoice created in this run; results has one entry per
    processed client so callers can show partial success.
    """

    success: bool
    message: str
    data: List[InvoiceResponseDTO] = Field(default_factory=list)
    results: List[ClientGenerationResultDTO] = Field(default_factory=list)
    cancelled: bool = False


# --- Manual invoice & invoice maintenance ------------------------------------


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for a manually entered invoice

    When amount is omitted the client's rental rate is used. A manual amount
    is interpreted the same way as the rate: gross when the client is VAT
    inclusive, net of VAT otherwise.
    """

    client_id: int
    billing_period_start: date
    billing_period_end: date
    due_date: date
    amount: Optional[Decimal] = Field(default=None, gt=0)
    has_withholding_tax: bool = False

    @model_validator(mode="after")
    def check_period(self):
        if self.billing_period_end < self.billing_period_start:
            raise ValueError("billing_period_end must not be before billing_period_start")
        return self


class InvoiceDetailDTO(InvoiceResponseDTO):
    """Invoice with its payment aggregate"""

    client_name: str
    total_paid: Decimal
    balance: Decimal


class UpdateInvoiceStatusCommandDTO(BaseModel):
    invoice_id: int
    status: InvoiceStatus


class InvoiceIdsCommandDTO(BaseModel):
    """Selection of invoices for a batch operation"""

    invoice_ids: List[int] = Field(..., min_length=1)


class SendInvoicesCommandDTO(InvoiceIdsCommandDTO):
    recipient_email: Optional[str] = Field(
        default=None,
        description="Send to this address instead of the client's billing email"
    )


class InvoiceOperationResultDTO(BaseModel):
    """Outcome of a per-invoice step of a batch (send, regenerate)"""

    invoice_id: int
    invoice_number: str
    success: bool
    error: Optional[str] = None


class BatchInvoiceOperationResponseDTO(BaseModel):
    success: bool
    message: str
    results: List[InvoiceOperationResultDTO] = Field(default_factory=list)


class DeleteInvoicesResponseDTO(BaseModel):
    success: bool
    message: str
    count: int


# --- Payments ----------------------------------------------------------------


class RecordPaymentCommandDTO(BaseModel):
    """Command DTO for recording a payment against an invoice"""

    invoice_id: int = Field(..., description="Invoice being paid")
    amount: Decimal = Field(..., gt=0, description="Amount received (must be > 0)")
    payment_date: date
    payment_method: str = Field(..., min_length=1)
    reference_number: Optional[str] = None
    remarks: Optional[str] = None


class PaymentResponseDTO(BaseModel):
    payment_id: int
    invoice_id: Optional[int]
    client_id: int
    amount: Decimal
    payment_date: date
    payment_method: str
    reference_number: Optional[str] = None
    remarks: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentResponseDTO":
        return cls(
            payment_id=payment.id,
            invoice_id=payment.invoice_id,
            client_id=payment.client_id,
            amount=payment.amount,
            payment_date=payment.payment_date,
            payment_method=payment.payment_method,
            reference_number=payment.reference_number,
            remarks=payment.remarks,
            created_at=payment.created_at,
        )


class RecordPaymentResponseDTO(PaymentResponseDTO):
    """Payment plus the invoice balance left after it"""

    invoice_number: str
    total_paid: Decimal
    balance: Decimal


# --- Clients & contracts -----------------------------------------------------


class ClientContactDTO(BaseModel):
    contact_person: str = Field(..., min_length=1)
    contact_position: str = ""
    email: str = ""
    mobile: str = ""
    is_primary: bool = False


class CreateClientCommandDTO(BaseModel):
    """One client row, either typed in or taken from a bulk upload"""

    client_name: str = Field(..., min_length=1)
    address: str = ""
    email: str = ""
    mobile: str = ""
    rental_rate: Decimal = Field(..., gt=0, description="Rate per billing period")
    vat_inclusive: bool = False
    billing_terms: BillingTerms = BillingTerms.MONTHLY
    custom_billing_terms: Optional[str] = None
    start_date: date
    end_date: date
    contacts: List[ClientContactDTO] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "client_name": "Servtrix Solutions Inc.",
                "rental_rate": "4500.00",
                "vat_inclusive": True,
                "billing_terms": "Quarterly",
                "start_date": "2025-01-01",
                "end_date": "2025-12-31",
                "contacts": [
                    {"contact_person": "Ana Cruz", "email": "ana@servtrix.ph", "is_primary": True}
                ]
            }
        }


class ImportClientsCommandDTO(BaseModel):
    clients: List[CreateClientCommandDTO] = Field(..., min_length=1)


class ClientResponseDTO(BaseModel):
    client_id: int
    client_name: str
    client_code: str
    rental_rate: Decimal
    vat_inclusive: bool
    billing_terms: str
    custom_billing_terms: Optional[str] = None
    start_date: date
    end_date: date
    status: str

    @classmethod
    def from_entity(cls, client: Client) -> "ClientResponseDTO":
        return cls(
            client_id=client.id,
            client_name=client.client_name,
            client_code=client.client_code,
            rental_rate=client.rental_rate,
            vat_inclusive=client.vat_inclusive,
            billing_terms=BillingTerms(client.billing_terms).value,
            custom_billing_terms=client.custom_billing_terms,
            start_date=client.start_date,
            end_date=client.end_date,
            status=ClientStatus(client.status).value,
        )


class ImportClientsResponseDTO(BaseModel):
    success: bool
    message: str
    data: List[ClientResponseDTO] = Field(default_factory=list)


class CreateContractCommandDTO(BaseModel):
    client_id: int
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ContractResponseDTO(BaseModel):
    contract_id: int
    contract_number: str
    client_id: int
    start_date: date
    end_date: date
    status: str
    created_at: datetime

    @classmethod
    def from_entity(cls, contract: Contract) -> "ContractResponseDTO":
        return cls(
            contract_id=contract.id,
            contract_number=contract.contract_number,
            client_id=contract.client_id,
            start_date=contract.start_date,
            end_date=contract.end_date,
            status=ContractStatus(contract.status).value,
            created_at=contract.created_at,
        )


# --- Company -----------------------------------------------------------------


class CompanyDTO(BaseModel):
    """Company profile printed on invoices"""

    name: str = Field(..., min_length=1)
    address: str = ""
    emails: str = ""
    mobiles: str = ""
    telephone: str = ""
