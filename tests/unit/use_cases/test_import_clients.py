"""Unit tests for CreateClient / ImportClients use cases"""

import asyncio
import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.billing.dtos import (
    ClientContactDTO,
    CreateClientCommandDTO,
    ImportClientsCommandDTO,
)
from src.app.use_cases.billing.import_clients import CreateClient, ImportClients


def client_row(name: str, **overrides) -> CreateClientCommandDTO:
    fields = dict(
        client_name=name,
        rental_rate=Decimal("4500.00"),
        start_date=date(2025, 1, 1),
        end_date=date(2025, 12, 31),
    )
    fields.update(overrides)
    return CreateClientCommandDTO(**fields)


@pytest.fixture
def mock_client_repo():
    repo = MagicMock()
    counter = {"next": 1}

    async def create(client):
        client.id = counter["next"]
        counter["next"] += 1
        return client

    repo.create = AsyncMock(side_effect=create)
    repo.add_contact = AsyncMock(side_effect=lambda contact: contact)
    return repo


@pytest.mark.asyncio
class TestCreateClient:

    async def test_first_contact_becomes_primary(self, mock_uow, mock_client_repo):
        command = client_row(
            "Servtrix Solutions Inc.",
            contacts=[
                ClientContactDTO(contact_person="Ana Cruz"),
                ClientContactDTO(contact_person="Ben Reyes"),
            ],
        )

        result = await CreateClient(mock_uow, mock_client_repo).execute(command)

        assert result.is_ok()
        assert result.value.client_code == "SERVTRIX"
        contacts = [call.args[0] for call in mock_client_repo.add_contact.await_args_list]
        assert [c.is_primary for c in contacts] == [True, False]
        assert all(c.client_id == 1 for c in contacts)

    async def test_explicit_primary_is_kept(self, mock_uow, mock_client_repo):
        command = client_row(
            "Servtrix Solutions Inc.",
            contacts=[
                ClientContactDTO(contact_person="Ana Cruz"),
                ClientContactDTO(contact_person="Ben Reyes", is_primary=True),
            ],
        )

        await CreateClient(mock_uow, mock_client_repo).execute(command)

        contacts = [call.args[0] for call in mock_client_repo.add_contact.await_args_list]
        assert [c.is_primary for c in contacts] == [False, True]


@pytest.mark.asyncio
class TestImportClients:

    async def test_all_rows_committed_once(self, mock_uow, mock_client_repo):
        command = ImportClientsCommandDTO(
            clients=[client_row("Servtrix Solutions Inc."), client_row("Northwind Traders")]
        )

        result = await ImportClients(mock_uow, mock_client_repo).execute(command)

        assert result.is_ok()
        assert result.value.message == "Imported 2 client(s)"
        assert [c.client_id for c in result.value.data] == [1, 2]
        mock_uow.commit.assert_awaited_once()

    async def test_failing_row_rolls_back_everything(self, mock_uow, mock_client_repo):
        """
        Given: The second row fails to insert
        Then: Nothing is committed and the row is named in the error
        """
        mock_client_repo.create = AsyncMock(
            side_effect=[MagicMock(id=1), Exception("value too long for column")]
        )
        command = ImportClientsCommandDTO(
            clients=[client_row("Servtrix Solutions Inc."), client_row("Northwind Traders")]
        )

        result = await ImportClients(mock_uow, mock_client_repo).execute(command)

        assert result.is_err()
        assert result.error.code == "IMPORT_CLIENTS_FAILED"
        assert "Row 2 (Northwind Traders)" in result.error.reason
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_called()

    async def test_timeout_commits_nothing(self, mock_uow, mock_client_repo):
        async def slow_create(client):
            await asyncio.sleep(1)
            return client

        mock_client_repo.create = AsyncMock(side_effect=slow_create)
        command = ImportClientsCommandDTO(clients=[client_row("Servtrix Solutions Inc.")])

        result = await ImportClients(mock_uow, mock_client_repo, timeout_seconds=0.01).execute(command)

        assert result.is_err()
        assert result.error.code == "IMPORT_TIMEOUT"
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_called()
