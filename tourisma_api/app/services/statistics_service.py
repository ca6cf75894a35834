"""
Service layer for dashboard metrics.

All figures are computed from the store on each call; nothing is
cached.  Commission is never stored on bookings: it is
``settings.commission_rate`` applied to the totals of bookings that are
not cancelled.  The support pseudo-partner is left out of the partner
counts.
"""

from __future__ import annotations

import logging

from ..core.config import settings
from ..core.store import DataStore
from ..schemas.booking import BookingStatus
from ..schemas.partner import PartnerStatus
from ..schemas.statistics import AdminOverview, BookingCounts, PartnerMetrics
from .experience_service import ExperienceService
from .partner_service import PartnerService

logger = logging.getLogger(__name__)


class StatisticsService:
    """Service providing aggregated metrics for partner and admin dashboards."""

    def __init__(self, store: DataStore) -> None:
        self.store = store
        self.partners = PartnerService(store)
        self.experiences = ExperienceService(store)

    def partner_metrics(self, partner_id: str) -> PartnerMetrics:
        """Metrics of the partner dashboard.

        ``confirmed`` counts confirmed and completed bookings; revenue
        covers every booking that is not cancelled.  ``commission_rate``
        is expressed in percent.
        """
        partner = self.partners.get_partner_or_404(partner_id)
        experiences = self.experiences.list_partner_experiences(partner_id)
        experience_ids = {e.id for e in experiences}
        bookings = [b for b in self.store.bookings if b.experience_id in experience_ids]

        counts = BookingCounts(
            confirmed=sum(1 for b in bookings if b.status in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)),
            pending=sum(1 for b in bookings if b.status == BookingStatus.PENDING),
            cancelled=sum(1 for b in bookings if b.status == BookingStatus.CANCELLED),
        )
        gross = sum(b.total_price for b in bookings if b.status != BookingStatus.CANCELLED)
        return PartnerMetrics(
            partner_id=partner.id,
            total_bookings=len(bookings),
            counts=counts,
            gross_revenue=gross,
            commission_rate=round(settings.commission_rate * 100, 2),
            commission_amount=round(gross * settings.commission_rate, 2),
            total_views=sum(e.views for e in experiences),
            avg_rating=partner.rating,
        )

    def overview(self) -> AdminOverview:
        """Platform-wide figures for the admin dashboard.

        ``total_revenue`` is the platform's commission income, not the
        gross booking volume.
        """
        partners = [p for p in self.store.partners if p.id != self.partners.support_partner_id]
        bookings = self.store.bookings
        revenue = sum(
            b.total_price * settings.commission_rate for b in bookings if b.status != BookingStatus.CANCELLED
        )
        return AdminOverview(
            active_partners=sum(1 for p in partners if p.status == PartnerStatus.ACTIVE),
            pending_partners=sum(1 for p in partners if p.status == PartnerStatus.PENDING),
            total_partners=len(partners),
            completed_bookings=sum(1 for b in bookings if b.status == BookingStatus.COMPLETED),
            ongoing_bookings=sum(
                1 for b in bookings if b.status in (BookingStatus.PENDING, BookingStatus.CONFIRMED)
            ),
            total_revenue=round(revenue, 2),
            avg_commission=round(settings.commission_rate * 100, 2) if partners else 0.0,
        )
