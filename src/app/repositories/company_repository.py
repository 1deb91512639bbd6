"""Company Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.company import Company


class CompanyRepository(ABC):

    @abstractmethod
    async def get(self) -> Optional[Company]:
        """The company profile, or None when not configured yet"""
        pass

    @abstractmethod
    async def save(self, company: Company) -> Company:
        """Insert or update the company profile"""
        pass
