"""CreateClient / ImportClients / GetClient Use Cases

Bulk import runs as one transaction: either every row is committed or none.
"""

import asyncio
import logging
from typing import List

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.client_repository import ClientRepository
from src.domain.client import Client, ClientStatus
from src.domain.client_contact import ClientContact
from .dtos import (
    ClientResponseDTO,
    CreateClientCommandDTO,
    ImportClientsCommandDTO,
    ImportClientsResponseDTO,
)

logger = logging.getLogger(__name__)

DEFAULT_BULK_TIMEOUT_SECONDS = 300


class ClientRowError(Exception):
    """A row of a bulk import could not be stored"""

    def __init__(self, row: int, client_name: str, cause: Exception):
        super().__init__(f"Row {row} ({client_name}): {cause}")
        self.row = row


async def persist_client(client_repo: ClientRepository, command: CreateClientCommandDTO) -> Client:
    client = await client_repo.create(
        Client(
            client_name=command.client_name.strip(),
            address=command.address,
            email=command.email,
            mobile=command.mobile,
            rental_rate=command.rental_rate,
            vat_inclusive=command.vat_inclusive,
            billing_terms=command.billing_terms,
            custom_billing_terms=command.custom_billing_terms,
            start_date=command.start_date,
            end_date=command.end_date,
            status=ClientStatus.ACTIVE,
        )
    )

    # The first contact is primary unless one is flagged explicitly
    has_primary = any(contact.is_primary for contact in command.contacts)
    for index, contact in enumerate(command.contacts):
        await client_repo.add_contact(
            ClientContact(
                client_id=client.id,
                contact_person=contact.contact_person,
                contact_position=contact.contact_position,
                email=contact.email,
                mobile=contact.mobile,
                is_primary=contact.is_primary or (not has_primary and index == 0),
            )
        )

    return client


class CreateClient:
    """Use Case: Create one client with its contacts"""

    def __init__(self, uow: UnitOfWork, client_repo: ClientRepository):
        self.uow = uow
        self.client_repo = client_repo

    async def execute(self, command: CreateClientCommandDTO) -> Result[ClientResponseDTO]:
        try:
            client = await persist_client(self.client_repo, command)
            await self.uow.commit()
            logger.info(f"Created client {client.id} ({client.client_name})")
            return Return.ok(ClientResponseDTO.from_entity(client))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_CLIENT_FAILED",
                    message="Failed to create client",
                    reason=str(e),
                )
            )


class ImportClients:
    """
    Use Case: Bulk client creation from an uploaded sheet

    Business Rules:
    1. All rows are stored in one transaction
    2. Any failing row rolls back the whole batch
    3. The batch is bounded by a generous timeout; on expiry nothing is committed
    """

    def __init__(
        self,
        uow: UnitOfWork,
        client_repo: ClientRepository,
        timeout_seconds: float = DEFAULT_BULK_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.client_repo = client_repo
        self.timeout_seconds = timeout_seconds

    async def execute(self, command: ImportClientsCommandDTO) -> Result[ImportClientsResponseDTO]:
        try:
            clients = await asyncio.wait_for(self._import(command), timeout=self.timeout_seconds)
            await self.uow.commit()

        except asyncio.TimeoutError:
            await self.uow.rollback()
            logger.error(f"Client import timed out after {self.timeout_seconds}s, nothing committed")
            return Return.err(
                Error(
                    code="IMPORT_TIMEOUT",
                    message=f"Import of {len(command.clients)} client(s) timed out",
                    reason=f"Exceeded {self.timeout_seconds}s",
                )
            )
        except ClientRowError as e:
            await self.uow.rollback()
            logger.error(f"Client import aborted, nothing committed: {e}")
            return Return.err(
                Error(
                    code="IMPORT_CLIENTS_FAILED",
                    message="Client import failed, no clients were created",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="IMPORT_CLIENTS_FAILED",
                    message="Client import failed, no clients were created",
                    reason=str(e),
                )
            )

        logger.info(f"Imported {len(clients)} client(s)")
        return Return.ok(
            ImportClientsResponseDTO(
                success=True,
                message=f"Imported {len(clients)} client(s)",
                data=[ClientResponseDTO.from_entity(client) for client in clients],
            )
        )

    async def _import(self, command: ImportClientsCommandDTO) -> List[Client]:
        clients = []
        for row, client_command in enumerate(command.clients, start=1):
            try:
                clients.append(await persist_client(self.client_repo, client_command))
            except Exception as e:
                raise ClientRowError(row, client_command.client_name, e) from e
        return clients


class GetClient:
    """Use Case: Retrieve a client by ID"""

    def __init__(self, client_repo: ClientRepository):
        self.client_repo = client_repo

    async def execute(self, client_id: int) -> Result[ClientResponseDTO]:
        try:
            client = await self.client_repo.get_by_id(client_id)
            if client is None:
                return Return.err(
                    Error(
                        code="CLIENT_NOT_FOUND",
                        message=f"Client with ID {client_id} not found",
                    )
                )
            return Return.ok(ClientResponseDTO.from_entity(client))
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_CLIENT_FAILED",
                    message="Failed to retrieve client",
                    reason=str(e),
                )
            )
