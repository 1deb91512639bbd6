from .base import BaseModel
from .client import Client, ClientStatus, BillingTerms, generate_client_code
from .client_contact import ClientContact
from .company import Company
from .contract import Contract, ContractStatus
from .invoice import Invoice, InvoiceStatus, can_transition
from .payment import Payment, summarize_payments
from .money import AmountBreakdown, calculate_amounts, round2, VAT_RATE, WITHHOLDING_TAX_RATE
from .billing_period import (
    BillingCadence,
    BillingPeriod,
    resolve_cadence,
    contract_range,
    partition_billing_periods,
    calculate_due_date,
    filter_new_periods,
)
from .numbering import DuplicateNumberError, next_sequence_number

__all__ = [
    "BaseModel",
    "Client",
    "ClientStatus",
    "BillingTerms",
    "generate_client_code",
    "ClientContact",
    "Company",
    "Contract",
    "ContractStatus",
    "Invoice",
    "InvoiceStatus",
    "can_transition",
    "Payment",
    "summarize_payments",
    "AmountBreakdown",
    "calculate_amounts",
    "round2",
    "VAT_RATE",
    "WITHHOLDING_TAX_RATE",
    "BillingCadence",
    "BillingPeriod",
    "resolve_cadence",
    "contract_range",
    "partition_billing_periods",
    "calculate_due_date",
    "filter_new_periods",
    "DuplicateNumberError",
    "next_sequence_number",
]
