"""Local filesystem storage for rendered invoices

Paths handed out are relative to the storage root
(invoices/{client_code}/{invoice_number}.pdf) so the root can move without
touching stored file_path values.
"""

import asyncio
import logging
from pathlib import Path

from src.app.services.invoice_storage import InvoiceStorage, invoice_storage_path

logger = logging.getLogger(__name__)


class LocalInvoiceStorage(InvoiceStorage):
    """Stores invoice documents under a local directory"""

    def __init__(self, root_dir):
        self.root_dir = Path(root_dir).resolve()

    def _resolve(self, path: str) -> Path:
        full_path = (self.root_dir / path).resolve()
        if self.root_dir not in full_path.parents:
            raise ValueError(f"Path {path!r} escapes the storage root")
        return full_path

    async def save(self, filename: str, content: bytes, client_code: str) -> str:
        path = invoice_storage_path(client_code, filename)
        full_path = self._resolve(path)

        def _write():
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(content)

        await asyncio.to_thread(_write)
        logger.debug(f"Wrote {len(content)} bytes to {full_path}")
        return path

    async def read(self, path: str) -> bytes:
        return await asyncio.to_thread(self._resolve(path).read_bytes)

    async def delete(self, path: str) -> None:
        await asyncio.to_thread(self._resolve(path).unlink, missing_ok=True)
