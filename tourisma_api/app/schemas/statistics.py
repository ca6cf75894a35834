"""
Pydantic models for dashboard metrics.
"""

from pydantic import BaseModel


class BookingCounts(BaseModel):
    confirmed: int
    pending: int
    cancelled: int


class PartnerMetrics(BaseModel):
    partner_id: str
    total_bookings: int
    counts: BookingCounts
    gross_revenue: float
    commission_rate: float
    commission_amount: float
    total_views: int
    avg_rating: float


class AdminOverview(BaseModel):
    active_partners: int
    pending_partners: int
    total_partners: int
    completed_bookings: int
    ongoing_bookings: int
    total_revenue: float
    avg_commission: float
