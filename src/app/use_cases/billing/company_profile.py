"""GetCompany / UpsertCompany Use Cases"""

import logging
from datetime import datetime

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.company_repository import CompanyRepository
from src.domain.company import Company
from .dtos import CompanyDTO

logger = logging.getLogger(__name__)


def _to_dto(company: Company) -> CompanyDTO:
    return CompanyDTO(
        name=company.name,
        address=company.address,
        emails=company.emails,
        mobiles=company.mobiles,
        telephone=company.telephone,
    )


class GetCompany:
    def __init__(self, company_repo: CompanyRepository):
        self.company_repo = company_repo

    async def execute(self) -> Result[CompanyDTO]:
        try:
            company = await self.company_repo.get()
            if company is None:
                return Return.err(
                    Error(
                        code="COMPANY_NOT_CONFIGURED",
                        message="Company profile is not configured",
                    )
                )
            return Return.ok(_to_dto(company))
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_COMPANY_FAILED",
                    message="Failed to retrieve company profile",
                    reason=str(e),
                )
            )


class UpsertCompany:
    """Use Case: Create the company profile, or overwrite the existing one"""

    def __init__(self, uow: UnitOfWork, company_repo: CompanyRepository):
        self.uow = uow
        self.company_repo = company_repo

    async def execute(self, command: CompanyDTO) -> Result[CompanyDTO]:
        try:
            company = await self.company_repo.get() or Company(name=command.name)

            company.name = command.name
            company.address = command.address
            company.emails = command.emails
            company.mobiles = command.mobiles
            company.telephone = command.telephone
            company.updated_at = datetime.utcnow()

            company = await self.company_repo.save(company)
            await self.uow.commit()

            logger.info(f"Company profile saved: {company.name}")
            return Return.ok(_to_dto(company))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPSERT_COMPANY_FAILED",
                    message="Failed to save company profile",
                    reason=str(e),
                )
            )
