"""Billing domain use cases"""
from .generate_invoices import GenerateInvoices
from .create_invoice import CreateInvoice
from .get_invoice import GetInvoice, GetInvoiceDocument
from .update_invoice_status import UpdateInvoiceStatus
from .settle_invoice import SettleInvoice
from .send_invoices import SendInvoices
from .regenerate_invoice_pdfs import RegenerateInvoicePdfs
from .delete_invoices import DeleteInvoices
from .record_payment import RecordPayment, ListPayments
from .import_clients import CreateClient, ImportClients, GetClient
from .create_contract import CreateContract
from .company_profile import GetCompany, UpsertCompany
from .invoice_numbering import InvoiceNumberAllocator
from .invoice_documents import BillingProfile, InvoiceDocumentWriter
from .dtos import (
    GenerateInvoicesCommandDTO,
    GenerateInvoicesResponseDTO,
    ClientGenerationResultDTO,
    InvoiceResponseDTO,
    CreateInvoiceCommandDTO,
    InvoiceDetailDTO,
    UpdateInvoiceStatusCommandDTO,
    InvoiceIdsCommandDTO,
    SendInvoicesCommandDTO,
    InvoiceOperationResultDTO,
    BatchInvoiceOperationResponseDTO,
    DeleteInvoicesResponseDTO,
    RecordPaymentCommandDTO,
    PaymentResponseDTO,
    RecordPaymentResponseDTO,
    ClientContactDTO,
    CreateClientCommandDTO,
    ImportClientsCommandDTO,
    ClientResponseDTO,
    ImportClientsResponseDTO,
    CreateContractCommandDTO,
    ContractResponseDTO,
    CompanyDTO,
)

__all__ = [
    "GenerateInvoices",
    "CreateInvoice",
    "GetInvoice",
    "GetInvoiceDocument",
    "UpdateInvoiceStatus",
    "SettleInvoice",
    "SendInvoices",
    "RegenerateInvoicePdfs",
    "DeleteInvoices",
    "RecordPayment",
    "ListPayments",
    "CreateClient",
    "ImportClients",
    "GetClient",
    "CreateContract",
    "GetCompany",
    "UpsertCompany",
    "InvoiceNumberAllocator",
    "BillingProfile",
    "InvoiceDocumentWriter",
    "GenerateInvoicesCommandDTO",
    "GenerateInvoicesResponseDTO",
    "ClientGenerationResultDTO",
    "InvoiceResponseDTO",
    "CreateInvoiceCommandDTO",
    "InvoiceDetailDTO",
    "UpdateInvoiceStatusCommandDTO",
    "InvoiceIdsCommandDTO",
    "SendInvoicesCommandDTO",
    "InvoiceOperationResultDTO",
    "BatchInvoiceOperationResponseDTO",
    "DeleteInvoicesResponseDTO",
    "RecordPaymentCommandDTO",
    "PaymentResponseDTO",
    "RecordPaymentResponseDTO",
    "ClientContactDTO",
    "CreateClientCommandDTO",
    "ImportClientsCommandDTO",
    "ClientResponseDTO",
    "ImportClientsResponseDTO",
    "CreateContractCommandDTO",
    "ContractResponseDTO",
    "CompanyDTO",
]
