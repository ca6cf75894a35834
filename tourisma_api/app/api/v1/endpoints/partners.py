"""
Partner endpoints for API v1.

Admins moderate partners (status changes, edits).  Partner owners read
and edit their own accounts, manage their experiences and see the
bookings made on them.  Anyone may submit a partner application.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import require_roles
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.booking import PartnerBooking
from tourisma_api.app.schemas.experience import Experience, ExperienceCreate
from tourisma_api.app.schemas.partner import (
    Partner,
    PartnerApplication,
    PartnerStatusUpdate,
    PartnerUpdate,
)
from tourisma_api.app.schemas.user import User, UserRole
from tourisma_api.app.services.booking_service import BookingService
from tourisma_api.app.services.experience_service import ExperienceService
from tourisma_api.app.services.partner_service import PartnerService


router = APIRouter()


@router.get("/", response_model=List[Partner])
async def list_partners(
    search: Optional[str] = Query(None, description="Filter by company name"),
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> List[Partner]:
    """List partners for moderation.  The support partner is not listed."""
    return PartnerService(store).list_partners(search)


@router.post("/applications", response_model=Partner, status_code=status.HTTP_201_CREATED)
async def apply_as_partner(
    application: PartnerApplication,
    store: DataStore = Depends(get_store),
) -> Partner:
    """Register a new partner; it stays ``PENDING`` until an admin activates it."""
    try:
        return PartnerService(store).apply(application)
    except TourismaError as e:
        raise http_error(e) from e


@router.get("/me", response_model=Partner)
async def read_my_partner(
    current_user: User = Depends(require_roles(UserRole.PARTNER)),
    store: DataStore = Depends(get_store),
) -> Partner:
    partner = PartnerService(store).get_partner_by_user_id(current_user.id)
    if partner is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No partner account for this user")
    return partner


@router.get("/{partner_id}", response_model=Partner)
async def get_partner(partner_id: str, store: DataStore = Depends(get_store)) -> Partner:
    try:
        return PartnerService(store).get_partner_or_404(partner_id)
    except TourismaError as e:
        raise http_error(e) from e


@router.patch("/{partner_id}", response_model=Partner)
async def update_partner(
    partner_id: str,
    updates: PartnerUpdate,
    current_user: User = Depends(require_roles(UserRole.PARTNER, UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> Partner:
    """Edit partner details.  Owners edit their own partner, admins any."""
    service = PartnerService(store)
    try:
        service.ensure_can_manage(current_user, partner_id)
        return service.update_partner(partner_id, updates)
    except TourismaError as e:
        raise http_error(e) from e


@router.put("/{partner_id}/status", response_model=Partner)
async def update_partner_status(
    partner_id: str,
    data: PartnerStatusUpdate,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> Partner:
    """Activate, suspend or reset a partner to pending.

    Suspended partners keep their experiences, which simply stop
    appearing in listings.
    """
    try:
        return PartnerService(store).update_partner_status(partner_id, data.status)
    except TourismaError as e:
        raise http_error(e) from e


@router.get("/{partner_id}/experiences", response_model=List[Experience])
async def list_partner_experiences(
    partner_id: str,
    current_user: User = Depends(require_roles(UserRole.PARTNER, UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> List[Experience]:
    """All experiences of a partner, including hidden ones."""
    try:
        PartnerService(store).ensure_can_manage(current_user, partner_id)
    except TourismaError as e:
        raise http_error(e) from e
    return ExperienceService(store).list_partner_experiences(partner_id)


@router.post("/{partner_id}/experiences", response_model=Experience, status_code=status.HTTP_201_CREATED)
async def create_experience(
    partner_id: str,
    data: ExperienceCreate,
    current_user: User = Depends(require_roles(UserRole.PARTNER, UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> Experience:
    try:
        PartnerService(store).ensure_can_manage(current_user, partner_id)
        return ExperienceService(store).add_experience(partner_id, data)
    except TourismaError as e:
        raise http_error(e) from e


@router.get("/{partner_id}/bookings", response_model=List[PartnerBooking])
async def list_partner_bookings(
    partner_id: str,
    current_user: User = Depends(require_roles(UserRole.PARTNER, UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> List[PartnerBooking]:
    """Bookings on the partner's experiences, with client and experience title."""
    try:
        PartnerService(store).ensure_can_manage(current_user, partner_id)
    except TourismaError as e:
        raise http_error(e) from e
    return BookingService(store).get_partner_bookings(partner_id)
