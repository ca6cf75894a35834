"""
Business logic for reviews.

Every new review recomputes the aggregate of its experience: ``rating``
is the mean of all of the experience's reviews rounded to one decimal
and ``reviews_count`` is their number.  When the reviewer names the
booking being reviewed, that booking must be their own, completed and
not reviewed yet; it is flagged ``has_reviewed`` afterwards.
"""

import html
import logging
from typing import List

from ..core.exceptions import ConflictError, PermissionDeniedError, ValidationFailedError
from ..core.store import DataStore
from ..schemas.booking import BookingStatus
from ..schemas.experience import Experience
from ..schemas.review import Review, ReviewCreate
from ..schemas.user import User
from .booking_service import BookingService
from .experience_service import ExperienceService

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for experience reviews."""

    def __init__(self, store: DataStore) -> None:
        self.store = store
        self.experiences = ExperienceService(store)
        self.bookings = BookingService(store)

    def list_reviews(self, experience_id: str) -> List[Review]:
        """Reviews of an experience, newest first, with escaped comments."""
        self.experiences.get_experience_or_404(experience_id)
        reviews = [r for r in self.store.reviews if r.experience_id == experience_id]
        reviews.sort(key=lambda r: r.date, reverse=True)
        return [r.model_copy(update={"comment": html.escape(r.comment)}) for r in reviews]

    def add_review(self, reviewer: User, data: ReviewCreate) -> Review:
        experience = self.experiences.get_experience_or_404(data.experience_id)
        booking = None
        if data.booking_id is not None:
            booking = self.bookings.get_booking_or_404(data.booking_id)
            if booking.client_id != reviewer.id:
                raise PermissionDeniedError(f"Booking {booking.id} does not belong to {reviewer.id}")
            if booking.experience_id != experience.id:
                raise ValidationFailedError(f"Booking {booking.id} is not for experience {experience.id}")
            if booking.status != BookingStatus.COMPLETED:
                raise ValidationFailedError(f"Booking {booking.id} is not completed")
            if booking.has_reviewed:
                raise ConflictError(f"Booking {booking.id} has already been reviewed")

        review = Review(
            id=self.store.new_id("r"),
            experience_id=experience.id,
            user_id=reviewer.id,
            user_name=reviewer.name,
            rating=data.rating,
            comment=data.comment,
            date=self.store.today(),
        )
        self.store.reviews.append(review)
        self._recompute_rating(experience)
        if booking is not None:
            booking.has_reviewed = True
        logger.info(
            "Review %s (%s/5) added to %s by %s; rating now %s over %s reviews",
            review.id,
            review.rating,
            experience.id,
            reviewer.id,
            experience.rating,
            experience.reviews_count,
        )
        return review

    def _recompute_rating(self, experience: Experience) -> None:
        ratings = [r.rating for r in self.store.reviews if r.experience_id == experience.id]
        experience.reviews_count = len(ratings)
        experience.rating = round(sum(ratings) / len(ratings), 1)
