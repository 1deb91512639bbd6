"""Client API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.use_cases.billing.dtos import (
    ClientResponseDTO,
    CreateClientCommandDTO,
    ImportClientsCommandDTO,
    ImportClientsResponseDTO,
)
from src.app.use_cases.billing.import_clients import CreateClient, GetClient, ImportClients
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.api.error import raise_for_error

router = APIRouter(prefix="/clients", tags=["Clients"])

ERROR_STATUS = {
    "CLIENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "IMPORT_TIMEOUT": status.HTTP_504_GATEWAY_TIMEOUT,
}


@router.post(
    "",
    response_model=ClientResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_client(
    request: CreateClientCommandDTO,
    session: AsyncSession = Depends(get_session),
):
    """Create a client with its contacts."""
    use_case = CreateClient(
        uow=SqlAlchemyUnitOfWork(session),
        client_repo=SqlAlchemyClientRepository(session),
    )

    result = await use_case.execute(request)
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.post(
    "/bulk",
    response_model=ImportClientsResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "A row failed; nothing was imported",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "IMPORT_CLIENTS_FAILED",
                            "message": "Client import failed, no clients were created"
                        }
                    }
                }
            }
        },
        504: {"description": "Import exceeded the bulk transaction timeout"},
    }
)
async def import_clients(
    request: ImportClientsCommandDTO,
    session: AsyncSession = Depends(get_session),
):
    """
    Import many clients at once (e.g. rows of an uploaded sheet).

    All rows are stored in one transaction: a single failing row leaves
    nothing behind.
    """
    use_case = ImportClients(
        uow=SqlAlchemyUnitOfWork(session),
        client_repo=SqlAlchemyClientRepository(session),
        timeout_seconds=ApplicationConfig.BULK_TRANSACTION_TIMEOUT_SECONDS,
    )

    result = await use_case.execute(request)
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.get(
    "/{client_id}",
    response_model=ClientResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_client(
    client_id: int,
    session: AsyncSession = Depends(get_session),
):
    use_case = GetClient(SqlAlchemyClientRepository(session))

    result = await use_case.execute(client_id)
    raise_for_error(result, ERROR_STATUS)
    return result.value
