"""
Booking endpoints for API v1.

Clients create bookings and may cancel them while pending.  The
partner owning the experience accepts, refuses or completes them.
Admins see every booking and may apply any allowed status change.
Illegal status changes answer 409.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import get_current_user, require_roles
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.booking import (
    AdminBooking,
    Booking,
    BookingCreate,
    BookingStatus,
    BookingStatusUpdate,
    ClientBooking,
)
from tourisma_api.app.schemas.user import User, UserRole
from tourisma_api.app.services.booking_service import BookingService


router = APIRouter()


@router.post("/", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(require_roles(UserRole.CLIENT)),
    store: DataStore = Depends(get_store),
) -> Booking:
    """Book an experience.  The booking starts ``PENDING``; the price is computed server-side."""
    try:
        return BookingService(store).create_booking(current_user.id, data)
    except TourismaError as e:
        raise http_error(e) from e


@router.get("/me", response_model=List[ClientBooking])
async def list_my_bookings(
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> List[ClientBooking]:
    return BookingService(store).get_client_bookings(current_user.id)


@router.get("/", response_model=List[AdminBooking])
async def list_all_bookings(
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> List[AdminBooking]:
    return BookingService(store).get_all_bookings()


@router.get("/{booking_id}", response_model=Booking)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> Booking:
    service = BookingService(store)
    try:
        booking = service.get_booking_or_404(booking_id)
    except TourismaError as e:
        raise http_error(e) from e
    if not service.can_view(booking, current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to view this booking")
    return booking


@router.post("/{booking_id}/cancel", response_model=Booking)
async def cancel_booking(
    booking_id: str,
    current_user: User = Depends(require_roles(UserRole.CLIENT)),
    store: DataStore = Depends(get_store),
) -> Booking:
    try:
        return BookingService(store).cancel_by_client(booking_id, current_user)
    except TourismaError as e:
        raise http_error(e) from e


async def _respond(booking_id: str, user: User, target: BookingStatus, store: DataStore) -> Booking:
    try:
        return BookingService(store).respond_as_partner(booking_id, user, target)
    except TourismaError as e:
        raise http_error(e) from e


@router.post("/{booking_id}/accept", response_model=Booking)
async def accept_booking(
    booking_id: str,
    current_user: User = Depends(require_roles(UserRole.PARTNER, UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> Booking:
    return await _respond(booking_id, current_user, BookingStatus.CONFIRMED, store)


@router.post("/{booking_id}/refuse", response_model=Booking)
async def refuse_booking(
    booking_id: str,
    current_user: User = Depends(require_roles(UserRole.PARTNER, UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> Booking:
    return await _respond(booking_id, current_user, BookingStatus.CANCELLED, store)


@router.post("/{booking_id}/complete", response_model=Booking)
async def complete_booking(
    booking_id: str,
    current_user: User = Depends(require_roles(UserRole.PARTNER, UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> Booking:
    return await _respond(booking_id, current_user, BookingStatus.COMPLETED, store)


@router.put("/{booking_id}/status", response_model=Booking)
async def set_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> Booking:
    """Apply any transition allowed by the booking state machine."""
    try:
        return BookingService(store).update_booking_status(booking_id, data.status)
    except TourismaError as e:
        raise http_error(e) from e
