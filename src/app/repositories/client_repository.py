"""Client Repository Interface

Defines the contract for client persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.client import Client
from src.domain.client_contact import ClientContact


class ClientRepository(ABC):
    """Repository interface for Client and ClientContact persistence"""

    @abstractmethod
    async def get_by_id(self, client_id: int) -> Optional[Client]:
        """
        Retrieve client by ID

        Args:
            client_id: Client ID

        Returns:
            Client if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_active_clients(self) -> List[Client]:
        """
        Retrieve all active clients, ordered by name

        Returns:
            List of active clients
        """
        pass

    @abstractmethod
    async def get_primary_contact(self, client_id: int) -> Optional[ClientContact]:
        """
        Retrieve the primary contact of a client

        Args:
            client_id: Client ID

        Returns:
            The flagged primary contact, else the first contact, else None
        """
        pass

    @abstractmethod
    async def create(self, client: Client) -> Client:
        """
        Create a new client

        Args:
            client: Client entity to persist

        Returns:
            Created Client with generated ID
        """
        pass

    @abstractmethod
    async def add_contact(self, contact: ClientContact) -> ClientContact:
        """
        Attach a contact to an existing client

        Args:
            contact: ClientContact with client_id set

        Returns:
            Created ClientContact
        """
        pass
