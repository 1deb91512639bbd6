"""Contract Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.contract import Contract


class ContractRepository(ABC):
    """Repository interface for Contract persistence"""

    @abstractmethod
    async def get_latest_active(self, client_id: int) -> Optional[Contract]:
        """
        Retrieve the most recent active contract of a client

        "Most recent" means the latest start_date.

        Args:
            client_id: Client ID

        Returns:
            Contract if the client has an active one, None otherwise
        """
        pass

    @abstractmethod
    async def get_max_contract_number(self, prefix: str) -> Optional[str]:
        """
        Highest contract number starting with prefix

        Args:
            prefix: e.g. "VO-SA-2025-"

        Returns:
            The highest number, or None if none exists
        """
        pass

    @abstractmethod
    async def create(self, contract: Contract) -> Contract:
        """
        Create a new contract

        Raises:
            DuplicateNumberError: contract_number is already taken
        """
        pass
