from .client_repository import ClientRepository
from .contract_repository import ContractRepository
from .invoice_repository import InvoiceRepository
from .payment_repository import PaymentRepository
from .company_repository import CompanyRepository

__all__ = [
    "ClientRepository",
    "ContractRepository",
    "InvoiceRepository",
    "PaymentRepository",
    "CompanyRepository",
]
