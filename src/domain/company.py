"""Company Domain Entity

The leasing company's own profile, printed as the provider block on every
invoice. Exactly one row is expected; generation refuses to run without it.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String, Text
from src.domain.base import BaseModel, IdType


class Company(BaseModel, table=True):
    __tablename__ = "company"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    address: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, default=""),
    )

    emails: str = Field(
        default="",
        sa_column=Column(String(500), nullable=False, default=""),
        description="Comma-separated email addresses"
    )

    mobiles: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
        description="Comma-separated mobile numbers"
    )

    telephone: str = Field(
        default="",
        sa_column=Column(String(100), nullable=False, default=""),
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
    )
