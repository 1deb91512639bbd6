"""SQLAlchemy Contract Repository Implementation"""

from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.contract_repository import ContractRepository
from src.domain.contract import Contract, ContractStatus
from src.domain.numbering import DuplicateNumberError


class SqlAlchemyContractRepository(ContractRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_latest_active(self, client_id: int) -> Optional[Contract]:
        statement = (
            select(Contract)
            .where(Contract.client_id == client_id)
            .where(Contract.status == ContractStatus.ACTIVE)
            .order_by(Contract.start_date.desc(), Contract.id.desc())
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_max_contract_number(self, prefix: str) -> Optional[str]:
        statement = (
            select(func.max(Contract.contract_number))
            .where(Contract.contract_number.like(f"{prefix}%"))
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def create(self, contract: Contract) -> Contract:
        """
        Create a new contract inside a savepoint

        Raises:
            DuplicateNumberError: contract_number is already taken
        """
        try:
            async with self.session.begin_nested():
                self.session.add(contract)
                await self.session.flush()
        except IntegrityError as e:
            raise DuplicateNumberError(contract.contract_number) from e

        await self.session.refresh(contract)
        return contract
