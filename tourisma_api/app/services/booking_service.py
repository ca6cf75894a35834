"""
Business logic for bookings.

Bookings are created ``PENDING`` and move through a small state machine:

* ``PENDING``   -> ``CONFIRMED`` (partner accepts) or ``CANCELLED``
  (client cancels, partner refuses)
* ``CONFIRMED`` -> ``COMPLETED`` (partner marks done) or ``CANCELLED``

``COMPLETED`` and ``CANCELLED`` are final.  Every status change goes
through :func:`assert_transition`, so an illegal change raises
:class:`InvalidTransitionError` and leaves the booking untouched.

The price is computed here, never taken from the client: children pay
the adult price times ``settings.child_price_ratio`` rounded half-up.
"""

import logging
import math
from typing import Dict, FrozenSet, List

from ..core.config import settings
from ..core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from ..core.store import DataStore
from ..schemas.booking import (
    AdminBooking,
    Booking,
    BookingCreate,
    BookingStatus,
    ClientBooking,
    PartnerBooking,
)
from ..schemas.partner import PartnerStatus
from ..schemas.user import User, UserRole
from .experience_service import ExperienceService
from .partner_service import PartnerService
from .user_service import UserService

logger = logging.getLogger(__name__)

BOOKING_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def assert_transition(current: BookingStatus, target: BookingStatus) -> None:
    if target not in BOOKING_TRANSITIONS[current]:
        raise InvalidTransitionError(current, target)


def child_unit_price(price: float, ratio: float = None) -> float:
    ratio = settings.child_price_ratio if ratio is None else ratio
    return math.floor(price * ratio + 0.5)


def compute_total_price(price: float, adults: int, children: int = 0, ratio: float = None) -> float:
    """Total for a party: ``adults * price + children * child_unit_price``."""
    return adults * price + children * child_unit_price(price, ratio)


class BookingService:
    """Service for creating bookings, changing their status and listing them."""

    def __init__(self, store: DataStore) -> None:
        self.store = store
        self.experiences = ExperienceService(store)
        self.partners = PartnerService(store)
        self.users = UserService(store)

    def get_booking(self, booking_id: str):
        return next((b for b in self.store.bookings if b.id == booking_id), None)

    def get_booking_or_404(self, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def create_booking(self, client_id: str, data: BookingCreate) -> Booking:
        """Create a ``PENDING`` booking for ``client_id``.

        Raises
        ------
        NotFoundError
            If the experience or the client does not exist.
        ValidationFailedError
            If the experience's partner is not active or the party does
            not fit in ``max_guests``.
        """
        experience = self.experiences.get_experience_or_404(data.experience_id)
        self.users.get_user_or_404(client_id)
        partner = self.partners.get_partner_or_404(experience.partner_id)
        if partner.status != PartnerStatus.ACTIVE or not experience.is_active:
            raise ValidationFailedError(f"Experience {experience.id} is not open for booking")
        guests = data.adults + data.children
        if guests > experience.max_guests:
            raise ValidationFailedError(
                f"Experience {experience.id} accepts at most {experience.max_guests} guests"
            )
        booking = Booking(
            id=self.store.new_id("b"),
            experience_id=experience.id,
            client_id=client_id,
            date=data.date,
            time=data.time,
            adults=data.adults,
            children=data.children,
            guests=guests,
            total_price=compute_total_price(experience.price, data.adults, data.children),
            status=BookingStatus.PENDING,
            created_at=self.store.today(),
        )
        self.store.bookings.append(booking)
        logger.info(
            "Booking %s created by %s for %s (%s guests, total %s)",
            booking.id,
            client_id,
            experience.id,
            guests,
            booking.total_price,
        )
        return booking

    def update_booking_status(self, booking_id: str, status: BookingStatus) -> Booking:
        booking = self.get_booking_or_404(booking_id)
        try:
            assert_transition(booking.status, status)
        except InvalidTransitionError:
            logger.warning("Rejected booking %s transition %s -> %s", booking_id, booking.status.value, status.value)
            raise
        booking.status = status
        logger.info("Booking %s is now %s", booking_id, status.value)
        return booking

    def cancel_by_client(self, booking_id: str, client: User) -> Booking:
        """Clients may cancel their own bookings while they are pending."""
        booking = self.get_booking_or_404(booking_id)
        if booking.client_id != client.id:
            raise PermissionDeniedError(f"Booking {booking_id} does not belong to {client.id}")
        if booking.status != BookingStatus.PENDING:
            raise InvalidTransitionError(booking.status, BookingStatus.CANCELLED)
        return self.update_booking_status(booking_id, BookingStatus.CANCELLED)

    def respond_as_partner(self, booking_id: str, actor: User, status: BookingStatus) -> Booking:
        """Accept, refuse or complete a booking on behalf of its partner.

        Accepting and refusing only apply to pending bookings; completing
        only to confirmed ones.
        """
        booking = self.get_booking_or_404(booking_id)
        experience = self.experiences.get_experience_or_404(booking.experience_id)
        self.partners.ensure_can_manage(actor, experience.partner_id)
        expected = BookingStatus.CONFIRMED if status == BookingStatus.COMPLETED else BookingStatus.PENDING
        if booking.status != expected:
            raise InvalidTransitionError(booking.status, status)
        return self.update_booking_status(booking_id, status)

    def can_view(self, booking: Booking, user: User) -> bool:
        if user.role == UserRole.ADMIN or booking.client_id == user.id:
            return True
        experience = self.experiences.get_experience(booking.experience_id)
        if experience is None:
            return False
        partner = self.partners.get_partner(experience.partner_id)
        return partner is not None and partner.user_id == user.id

    def get_client_bookings(self, client_id: str) -> List[ClientBooking]:
        return [
            ClientBooking(
                **b.model_dump(),
                experience=self.experiences.get_experience(b.experience_id),
            )
            for b in self.store.bookings
            if b.client_id == client_id
        ]

    def get_partner_bookings(self, partner_id: str) -> List[PartnerBooking]:
        experience_ids = {e.id for e in self.experiences.list_partner_experiences(partner_id)}
        results = []
        for b in self.store.bookings:
            if b.experience_id not in experience_ids:
                continue
            experience = self.experiences.get_experience(b.experience_id)
            results.append(
                PartnerBooking(
                    **b.model_dump(),
                    client=self.users.get_user(b.client_id),
                    experience_name=experience.title if experience else None,
                )
            )
        return results

    def get_all_bookings(self) -> List[AdminBooking]:
        results = []
        for b in self.store.bookings:
            experience = self.experiences.get_experience(b.experience_id)
            partner = self.partners.get_partner(experience.partner_id) if experience else None
            results.append(
                AdminBooking(
                    **b.model_dump(),
                    client=self.users.get_user(b.client_id),
                    experience=experience,
                    experience_name=experience.title if experience else None,
                    partner_name=partner.company_name if partner else None,
                )
            )
        return results
