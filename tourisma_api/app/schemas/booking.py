"""
Pydantic models for bookings.

A booking is a client's reservation of an experience for a date.  The
price is computed by the service from the experience price and the
number of adults and children, so ``BookingCreate`` carries no price.
The joined views (``ClientBooking``, ``PartnerBooking``,
``AdminBooking``) are what the dashboards of each role display.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .experience import Experience
from .user import User


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Booking(BaseModel):
    id: str
    experience_id: str
    client_id: str
    date: dt.date
    time: str = "09:00"
    adults: int
    children: int = 0
    guests: int
    total_price: float
    status: BookingStatus = BookingStatus.PENDING
    created_at: dt.date
    has_reviewed: bool = False


class BookingCreate(BaseModel):
    """Schema for creating a booking; the client is the current user."""

    experience_id: str
    date: dt.date
    time: str = Field("09:00", pattern=r"^\d{2}:\d{2}$")
    adults: int = Field(1, ge=1)
    children: int = Field(0, ge=0)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class ClientBooking(Booking):
    experience: Optional[Experience] = None


class PartnerBooking(Booking):
    client: Optional[User] = None
    experience_name: Optional[str] = None


class AdminBooking(Booking):
    client: Optional[User] = None
    experience: Optional[Experience] = None
    experience_name: Optional[str] = None
    partner_name: Optional[str] = None
