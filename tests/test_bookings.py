import datetime as dt

import pytest

from tourisma_api.app.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from tourisma_api.app.schemas.booking import BookingCreate, BookingStatus
from tourisma_api.app.schemas.partner import PartnerStatus
from tourisma_api.app.services.booking_service import (
    BookingService,
    assert_transition,
    compute_total_price,
)
from tourisma_api.app.services.partner_service import PartnerService


def _request(**overrides):
    data = {"experience_id": "e1", "date": dt.date(2024, 4, 1), "adults": 2, "children": 1}
    data.update(overrides)
    return BookingCreate(**data)


def test_total_price_rounds_child_price_half_up():
    assert compute_total_price(450, 2, 1) == 1125
    assert compute_total_price(345, 0, 1) == 173
    assert compute_total_price(800, 3) == 2400


def test_create_booking_is_pending_with_computed_total(store):
    booking = BookingService(store).create_booking("u1", _request())
    assert booking.status == BookingStatus.PENDING
    assert booking.total_price == 1125
    assert booking.guests == 3
    assert booking.time == "09:00"
    assert booking.created_at == store.today()
    assert booking.id == "b6"
    assert booking in store.bookings


def test_create_booking_rejects_unknown_experience_and_client(store):
    service = BookingService(store)
    with pytest.raises(NotFoundError):
        service.create_booking("u1", _request(experience_id="e999"))
    with pytest.raises(NotFoundError):
        service.create_booking("u999", _request())


def test_create_booking_rejects_too_many_guests(store):
    with pytest.raises(ValidationFailedError):
        BookingService(store).create_booking("u1", _request(experience_id="e3", adults=5, children=2))


def test_create_booking_rejects_suspended_partner(store):
    PartnerService(store).update_partner_status("p1", PartnerStatus.SUSPENDED)
    with pytest.raises(ValidationFailedError):
        BookingService(store).create_booking("u1", _request())


@pytest.mark.parametrize(
    "current,target",
    [
        (BookingStatus.PENDING, BookingStatus.COMPLETED),
        (BookingStatus.PENDING, BookingStatus.PENDING),
        (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
        (BookingStatus.CONFIRMED, BookingStatus.PENDING),
    ],
)
def test_illegal_transitions_raise(current, target):
    with pytest.raises(InvalidTransitionError):
        assert_transition(current, target)


def test_illegal_transition_leaves_booking_untouched(store):
    service = BookingService(store)
    with pytest.raises(InvalidTransitionError):
        service.update_booking_status("b1", BookingStatus.CANCELLED)
    assert service.get_booking("b1").status == BookingStatus.COMPLETED


def test_client_cancels_only_own_pending_booking(store):
    service = BookingService(store)
    client = store.users[0]
    assert service.cancel_by_client("b3", client).status == BookingStatus.CANCELLED
    with pytest.raises(InvalidTransitionError):
        service.cancel_by_client("b2", client)
    with pytest.raises(PermissionDeniedError):
        service.cancel_by_client("b4", store.users[1])


def test_partner_accepts_then_completes(store):
    service = BookingService(store)
    sophie = next(u for u in store.users if u.id == "u2")
    assert service.respond_as_partner("b3", sophie, BookingStatus.CONFIRMED).status == BookingStatus.CONFIRMED
    assert service.respond_as_partner("b3", sophie, BookingStatus.COMPLETED).status == BookingStatus.COMPLETED


def test_partner_cannot_complete_pending_or_touch_other_partners(store):
    service = BookingService(store)
    sophie = next(u for u in store.users if u.id == "u2")
    with pytest.raises(InvalidTransitionError):
        service.respond_as_partner("b4", sophie, BookingStatus.COMPLETED)
    with pytest.raises(PermissionDeniedError):
        service.respond_as_partner("b5", sophie, BookingStatus.CANCELLED)


def test_client_view_joins_experience(store):
    rows = BookingService(store).get_client_bookings("u1")
    assert [r.id for r in rows] == ["b1", "b2", "b3", "b4", "b5"]
    assert rows[0].experience.id == "e1"


def test_partner_view_only_covers_own_experiences(store):
    rows = BookingService(store).get_partner_bookings("p1")
    assert {r.id for r in rows} == {"b1", "b3", "b4"}
    assert all(r.client.id == "u1" for r in rows)
    assert rows[0].experience_name.startswith("Randonnée")


def test_admin_view_joins_partner_name(store):
    rows = {r.id: r for r in BookingService(store).get_all_bookings()}
    assert len(rows) == 5
    assert rows["b2"].partner_name == "Agafay Luxury Camp"
    assert rows["b5"].experience.id == "e4"
