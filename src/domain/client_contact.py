"""Client Contact Domain Entity"""

from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, ForeignKey, String
from src.domain.base import BaseModel, IdType


class ClientContact(BaseModel, table=True):
    """
    Contact person of a client

    The primary contact is printed in the "Bill To" block of invoices.
    """

    __tablename__ = "client_contacts"
    __table_args__ = (
        Index('ix_client_contacts_client_id', 'client_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    client_id: int = Field(
        sa_column=Column(IdType, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Client"
    )

    contact_person: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    contact_position: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
    )

    email: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
    )

    mobile: str = Field(
        default="",
        sa_column=Column(String(50), nullable=False, default=""),
    )

    is_primary: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
    )
