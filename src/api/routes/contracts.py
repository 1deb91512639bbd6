"""Contract API Routes"""

from typing import Callable
from datetime import date

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.use_cases.billing.dtos import ContractResponseDTO, CreateContractCommandDTO
from src.app.use_cases.billing.create_contract import CreateContract
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_clock, get_session
from src.api.error import raise_for_error

router = APIRouter(prefix="/contracts", tags=["Contracts"])

ERROR_STATUS = {
    "CLIENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


@router.post(
    "",
    response_model=ContractResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Client not found"}},
)
async def create_contract(
    request: CreateContractCommandDTO,
    session: AsyncSession = Depends(get_session),
    clock: Callable[[], date] = Depends(get_clock),
):
    """
    Register a lease contract.

    The contract gets the next VO-SA-{year}-NNNN number. While active, its
    dates govern invoice generation for the client.
    """
    use_case = CreateContract(
        uow=SqlAlchemyUnitOfWork(session),
        client_repo=SqlAlchemyClientRepository(session),
        contract_repo=SqlAlchemyContractRepository(session),
        prefix=ApplicationConfig.CONTRACT_NUMBER_PREFIX,
        width=ApplicationConfig.CONTRACT_NUMBER_WIDTH,
        max_retries=ApplicationConfig.NUMBER_ALLOCATION_MAX_RETRIES,
        clock=clock,
    )

    result = await use_case.execute(request)
    raise_for_error(result, ERROR_STATUS)
    return result.value
