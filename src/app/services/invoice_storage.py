"""Invoice Document Storage Interface

Rendered invoices live under invoices/{client_code}/{invoice_number}.pdf.
"""

from abc import ABC, abstractmethod


def invoice_filename(invoice_number: str) -> str:
    return f"{invoice_number}.pdf"


def invoice_storage_path(client_code: str, filename: str) -> str:
    return f"invoices/{client_code}/{filename}"


class InvoiceStorage(ABC):

    @abstractmethod
    async def save(self, filename: str, content: bytes, client_code: str) -> str:
        """
        Store a rendered document in the client's folder

        Returns:
            Storage path to keep in Invoice.file_path
        """
        pass

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """Load a stored document. Raises FileNotFoundError if missing."""
        pass

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Remove a stored document; missing files are ignored"""
        pass
