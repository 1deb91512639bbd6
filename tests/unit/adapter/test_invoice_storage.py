"""Unit tests for local invoice storage"""

import pytest

from src.adapter.services.invoice_storage import LocalInvoiceStorage


@pytest.mark.asyncio
class TestLocalInvoiceStorage:

    async def test_save_read_delete(self, tmp_path):
        storage = LocalInvoiceStorage(tmp_path)

        path = await storage.save("OFC00000219.pdf", b"%PDF-1.4", "SERVTRIX")

        assert path == "invoices/SERVTRIX/OFC00000219.pdf"
        assert (tmp_path / "invoices" / "SERVTRIX" / "OFC00000219.pdf").exists()
        assert await storage.read(path) == b"%PDF-1.4"

        await storage.delete(path)
        await storage.delete(path)

        assert not (tmp_path / path).exists()

    async def test_read_missing_raises(self, tmp_path):
        storage = LocalInvoiceStorage(tmp_path)

        with pytest.raises(FileNotFoundError):
            await storage.read("invoices/SERVTRIX/missing.pdf")

    async def test_paths_outside_root_rejected(self, tmp_path):
        storage = LocalInvoiceStorage(tmp_path / "store")

        with pytest.raises(ValueError):
            await storage.read("../secrets.txt")
