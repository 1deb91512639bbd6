"""SQLAlchemy Client Repository Implementation

Implements client and contact persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.client_repository import ClientRepository
from src.domain.client import Client, ClientStatus
from src.domain.client_contact import ClientContact


class SqlAlchemyClientRepository(ClientRepository):
    """
    SQLAlchemy implementation of ClientRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, client_id: int) -> Optional[Client]:
        statement = select(Client).where(Client.id == client_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_active_clients(self) -> List[Client]:
        """
        Retrieve all active clients

        Returns:
            Active clients ordered by name, then ID
        """
        statement = (
            select(Client)
            .where(Client.status == ClientStatus.ACTIVE)
            .order_by(Client.client_name, Client.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_primary_contact(self, client_id: int) -> Optional[ClientContact]:
        statement = (
            select(ClientContact)
            .where(ClientContact.client_id == client_id)
            .order_by(ClientContact.is_primary.desc(), ClientContact.id)
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def create(self, client: Client) -> Client:
        """
        Create a new client

        Args:
            client: Client entity to persist

        Returns:
            Created Client with generated ID
        """
        self.session.add(client)
        await self.session.flush()
        await self.session.refresh(client)
        return client

    async def add_contact(self, contact: ClientContact) -> ClientContact:
        self.session.add(contact)
        await self.session.flush()
        await self.session.refresh(contact)
        return contact
