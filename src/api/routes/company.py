"""Company Profile API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.billing.dtos import CompanyDTO
from src.app.use_cases.billing.company_profile import GetCompany, UpsertCompany
from src.adapter.repositories.company_repository import SqlAlchemyCompanyRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.api.error import raise_for_error

router = APIRouter(prefix="/company", tags=["Company"])

ERROR_STATUS = {
    "COMPANY_NOT_CONFIGURED": status.HTTP_404_NOT_FOUND,
}


@router.get("", response_model=CompanyDTO, status_code=status.HTTP_200_OK)
async def get_company(session: AsyncSession = Depends(get_session)):
    """Company profile printed on invoices."""
    result = await GetCompany(SqlAlchemyCompanyRepository(session)).execute()
    raise_for_error(result, ERROR_STATUS)
    return result.value


@router.put("", response_model=CompanyDTO, status_code=status.HTTP_200_OK)
async def upsert_company(
    request: CompanyDTO,
    session: AsyncSession = Depends(get_session),
):
    """Create or replace the company profile."""
    use_case = UpsertCompany(
        uow=SqlAlchemyUnitOfWork(session),
        company_repo=SqlAlchemyCompanyRepository(session),
    )

    result = await use_case.execute(request)
    raise_for_error(result, ERROR_STATUS)
    return result.value
