"""CreateContract Use Case

Registers a lease contract under the next VO-SA-{year}-NNNN number.
"""

import logging
from datetime import date
from typing import Callable

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.contract_repository import ContractRepository
from src.domain.contract import Contract, ContractStatus
from src.domain.numbering import DuplicateNumberError, contract_number_prefix, next_sequence_number
from .dtos import ContractResponseDTO, CreateContractCommandDTO

logger = logging.getLogger(__name__)


class CreateContract:
    """
    Use Case: Create a contract for a client

    Business Rules:
    1. The client must exist
    2. end_date >= start_date (validated by the command)
    3. Numbers are sequential per issue year, starting at 0001
    4. A number taken concurrently is re-read and retried
    """

    def __init__(
        self,
        uow: UnitOfWork,
        client_repo: ClientRepository,
        contract_repo: ContractRepository,
        prefix: str = "VO-SA",
        width: int = 4,
        max_retries: int = 5,
        clock: Callable[[], date] = date.today,
    ):
        self.uow = uow
        self.client_repo = client_repo
        self.contract_repo = contract_repo
        self.prefix = prefix
        self.width = width
        self.max_retries = max(1, max_retries)
        self.clock = clock

    async def execute(self, command: CreateContractCommandDTO) -> Result[ContractResponseDTO]:
        try:
            # Step 1: Client must exist
            client = await self.client_repo.get_by_id(command.client_id)
            if client is None:
                return Return.err(
                    Error(
                        code="CLIENT_NOT_FOUND",
                        message=f"Client with ID {command.client_id} not found",
                    )
                )

            # Step 2: Number and persist
            prefix = contract_number_prefix(self.prefix, self.clock().year)
            contract = Contract(
                contract_number="",
                client_id=command.client_id,
                start_date=command.start_date,
                end_date=command.end_date,
                status=ContractStatus.ACTIVE,
            )

            for attempt in range(1, self.max_retries + 1):
                current_max = await self.contract_repo.get_max_contract_number(prefix)
                contract.contract_number = next_sequence_number(current_max, prefix, self.width)
                try:
                    contract = await self.contract_repo.create(contract)
                    break
                except DuplicateNumberError as e:
                    logger.warning(
                        f"Contract number {e.number} taken concurrently "
                        f"(attempt {attempt}/{self.max_retries})"
                    )
                    if attempt == self.max_retries:
                        raise

            # Step 3: Commit
            await self.uow.commit()

            logger.info(f"Created contract {contract.contract_number} for client {command.client_id}")
            return Return.ok(ContractResponseDTO.from_entity(contract))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_CONTRACT_FAILED",
                    message="Failed to create contract",
                    reason=str(e),
                )
            )
