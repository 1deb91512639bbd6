"""Client Domain Entity

A virtual-office tenant with a rental rate and a billing cadence.
"""

import re
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, CheckConstraint, Date, Numeric, String, Text
from src.domain.base import BaseModel, IdType


class BillingTerms(str, Enum):
    """Billing cadence labels as entered by staff"""
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    SEMI_ANNUAL = "Semi-Annual"
    ANNUAL = "Annual"
    OTHER = "Other"        # free text in custom_billing_terms


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def generate_client_code(client_name: str) -> str:
    """
    Short folder code for a client's documents

    "Servtrix Solutions Inc." -> "SERVTRIX"
    """
    words = client_name.strip().upper().split()
    if not words:
        return "CLIENT"
    code = re.sub(r"[^A-Z0-9]", "", words[0][:10])
    return code or "CLIENT"


class Client(BaseModel, table=True):
    """
    Client - Virtual office tenant

    Domain Rules:
    - rental_rate is the rate for ONE billing period (a quarterly client
      stores the quarterly rate)
    - end_date >= start_date, both inclusive
    - Only active clients are picked up by bulk invoice generation
    """

    __tablename__ = "clients"
    __table_args__ = (
        CheckConstraint('end_date >= start_date', name='client_dates_ordered'),
        Index('ix_clients_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique client identifier (auto-increment)"
    )

    client_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Registered client / company name"
    )

    address: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, default=""),
        description="Billing address"
    )

    email: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
        description="Main billing email"
    )

    mobile: str = Field(
        default="",
        sa_column=Column(String(50), nullable=False, default=""),
        description="Main mobile number"
    )

    rental_rate: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Rate per billing period"
    )

    vat_inclusive: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
        description="True when rental_rate already includes VAT"
    )

    billing_terms: BillingTerms = Field(
        default=BillingTerms.MONTHLY,
        description="Billing cadence"
    )

    custom_billing_terms: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Free-text terms when billing_terms is Other"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Lease start (inclusive)"
    )

    end_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Lease end (inclusive)"
    )

    status: ClientStatus = Field(
        default=ClientStatus.ACTIVE,
        description="Client status (active, inactive)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Client creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    @property
    def client_code(self) -> str:
        return generate_client_code(self.client_name)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "client_name": "Servtrix Solutions Inc.",
                "address": "Unit 12, Makati City",
                "email": "billing@servtrix.ph",
                "mobile": "+639171234567",
                "rental_rate": "4500.00",
                "vat_inclusive": True,
                "billing_terms": "Quarterly",
                "start_date": "2025-01-01",
                "end_date": "2025-12-31",
                "status": "active"
            }
        }
