"""SQLAlchemy Company Repository Implementation"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.company_repository import CompanyRepository
from src.domain.company import Company


class SqlAlchemyCompanyRepository(CompanyRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self) -> Optional[Company]:
        statement = select(Company).order_by(Company.id).limit(1)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def save(self, company: Company) -> Company:
        self.session.add(company)
        await self.session.flush()
        await self.session.refresh(company)
        return company
