from tourisma_api.app.schemas.booking import BookingStatus
from tourisma_api.app.schemas.partner import PartnerStatus
from tourisma_api.app.services.booking_service import BookingService
from tourisma_api.app.services.partner_service import PartnerService
from tourisma_api.app.services.statistics_service import StatisticsService


def test_partner_metrics(store):
    metrics = StatisticsService(store).partner_metrics("p1")
    assert metrics.total_bookings == 3
    assert (metrics.counts.confirmed, metrics.counts.pending, metrics.counts.cancelled) == (1, 2, 0)
    assert metrics.gross_revenue == 5700
    assert metrics.commission_rate == 15
    assert metrics.commission_amount == 855
    assert metrics.avg_rating == 4.8


def test_cancelled_bookings_do_not_earn_commission(store):
    BookingService(store).update_booking_status("b4", BookingStatus.CANCELLED)
    metrics = StatisticsService(store).partner_metrics("p1")
    assert metrics.gross_revenue == 2700
    assert metrics.counts.cancelled == 1


def test_admin_overview(store):
    overview = StatisticsService(store).overview()
    assert overview.total_partners == 4
    assert overview.active_partners == 4
    assert overview.pending_partners == 0
    assert overview.completed_bookings == 1
    assert overview.ongoing_bookings == 4
    assert overview.total_revenue == 1147.5
    assert overview.avg_commission == 15


def test_admin_overview_tracks_moderation(store):
    PartnerService(store).update_partner_status("p4", PartnerStatus.PENDING)
    overview = StatisticsService(store).overview()
    assert overview.active_partners == 3
    assert overview.pending_partners == 1
