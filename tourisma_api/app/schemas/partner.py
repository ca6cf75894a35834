"""
Pydantic models for partners (hosts) and their moderation.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PartnerStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class Partner(BaseModel):
    id: str
    user_id: str
    company_name: str
    description: str = ""
    city: str
    phone: str
    status: PartnerStatus
    join_date: dt.date
    rating: float = 0.0


class PartnerUpdate(BaseModel):
    """Editable partner details.

    Only the fields that are supplied are changed.  Status and rating are
    not editable through this schema; status has its own endpoint and
    rating is maintained by the platform.
    """

    company_name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    city: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None


class PartnerStatusUpdate(BaseModel):
    status: PartnerStatus


class PartnerApplication(BaseModel):
    """Schema for the "become a partner" form.

    Submitting it creates a partner user and a partner row awaiting
    validation by an administrator.
    """

    name: str = Field(..., min_length=1, description="Contact person")
    email: str = Field(..., min_length=3)
    company_name: str = Field(..., min_length=1)
    description: str = ""
    city: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
