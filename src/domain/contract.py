"""Contract Domain Entity

Lease contract of a client. When a client has an active contract its dates
govern invoice generation instead of the client's own dates.
"""

from datetime import datetime, date
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, ForeignKey, String
from src.domain.base import BaseModel, IdType


class ContractStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class Contract(BaseModel, table=True):
    """
    Contract - Service agreement for a virtual office lease

    Domain Rules:
    - contract_number is unique (VO-SA-YYYY-NNNN)
    - end_date >= start_date, both inclusive
    - The most recent active contract (by start_date) is the governing one
    """

    __tablename__ = "contracts"
    __table_args__ = (
        CheckConstraint('end_date >= start_date', name='contract_dates_ordered'),
        Index('ix_contracts_client_status', 'client_id', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique contract identifier (auto-increment)"
    )

    contract_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique contract number (e.g., VO-SA-2025-0001)"
    )

    client_id: int = Field(
        sa_column=Column(IdType, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Client"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Contract start (inclusive)"
    )

    end_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Contract end (inclusive)"
    )

    status: ContractStatus = Field(
        default=ContractStatus.ACTIVE,
        description="Contract status (active, expired, terminated)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Contract creation timestamp"
    )
