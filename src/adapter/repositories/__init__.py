from .client_repository import SqlAlchemyClientRepository
from .contract_repository import SqlAlchemyContractRepository
from .invoice_repository import SqlAlchemyInvoiceRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .company_repository import SqlAlchemyCompanyRepository

__all__ = [
    "SqlAlchemyClientRepository",
    "SqlAlchemyContractRepository",
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyCompanyRepository",
]
