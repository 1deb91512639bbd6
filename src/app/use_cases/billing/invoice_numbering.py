"""Invoice number allocation

Reads the current maximum, hands out the next number and inserts the invoice.
The invoice_number column is unique: when a concurrent request inserted the
same number first, the repository raises DuplicateNumberError and the
allocator re-reads the maximum and tries again.
"""

import logging
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice
from src.domain.numbering import DuplicateNumberError, next_sequence_number

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "OFC"
DEFAULT_WIDTH = 8
DEFAULT_SEED = 219
DEFAULT_MAX_RETRIES = 5


class InvoiceNumberAllocator:
    """
    Allocates OFC######## numbers and persists invoices under them

    Usage:
        allocator = InvoiceNumberAllocator(invoice_repo)
        invoice = await allocator.create_numbered(invoice)
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        prefix: str = DEFAULT_PREFIX,
        width: int = DEFAULT_WIDTH,
        seed: int = DEFAULT_SEED,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        self.invoice_repo = invoice_repo
        self.prefix = prefix
        self.width = width
        self.seed = seed
        self.max_retries = max(1, max_retries)

    async def next_number(self) -> str:
        current_max = await self.invoice_repo.get_max_invoice_number(self.prefix)
        return next_sequence_number(current_max, self.prefix, self.width, self.seed)

    async def create_numbered(self, invoice: Invoice) -> Invoice:
        """
        Assign the next free number to invoice and persist it

        Raises:
            DuplicateNumberError: every attempt collided with another writer
        """
        last_error = None
        for attempt in range(1, self.max_retries + 1):
            invoice.invoice_number = await self.next_number()
            try:
                return await self.invoice_repo.create(invoice)
            except DuplicateNumberError as e:
                last_error = e
                logger.warning(
                    f"Invoice number {e.number} taken concurrently "
                    f"(attempt {attempt}/{self.max_retries}), re-reading sequence"
                )

        raise last_error
