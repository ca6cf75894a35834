"""
Experience endpoints for API v1.

Listing and search are public and only return active experiences of
active partners; the same rule applies to the detail view, which counts
a view.  Editing is reserved to the owning partner and admins.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import require_roles
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.experience import Experience, ExperienceUpdate
from tourisma_api.app.schemas.user import User, UserRole
from tourisma_api.app.services.experience_service import ExperienceService
from tourisma_api.app.services.partner_service import PartnerService


router = APIRouter()


@router.get("/", response_model=List[Experience])
async def list_experiences(
    category: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    max_price: Optional[float] = Query(None, ge=0),
    store: DataStore = Depends(get_store),
) -> List[Experience]:
    """List visible experiences, filtered by category, city and maximum price."""
    return ExperienceService(store).search(category=category, city=city, max_price=max_price)


@router.get("/{experience_id}", response_model=Experience)
async def get_experience(experience_id: str, store: DataStore = Depends(get_store)) -> Experience:
    service = ExperienceService(store)
    try:
        service.get_visible_experience_or_404(experience_id)
        return service.record_view(experience_id)
    except TourismaError as e:
        raise http_error(e) from e


@router.patch("/{experience_id}", response_model=Experience)
async def update_experience(
    experience_id: str,
    updates: ExperienceUpdate,
    current_user: User = Depends(require_roles(UserRole.PARTNER, UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> Experience:
    service = ExperienceService(store)
    try:
        experience = service.get_experience_or_404(experience_id)
        PartnerService(store).ensure_can_manage(current_user, experience.partner_id)
        return service.update_experience(experience_id, updates)
    except TourismaError as e:
        raise http_error(e) from e
