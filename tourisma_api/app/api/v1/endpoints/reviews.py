"""
Review endpoints for API v1.

Clients review experiences, optionally pointing at the completed
booking being reviewed.  Comments are escaped when listed.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import require_roles
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.review import Review, ReviewCreate
from tourisma_api.app.schemas.user import User, UserRole
from tourisma_api.app.services.review_service import ReviewService


router = APIRouter()


@router.post("/reviews", response_model=Review, status_code=status.HTTP_201_CREATED)
async def create_review(
    data: ReviewCreate,
    current_user: User = Depends(require_roles(UserRole.CLIENT)),
    store: DataStore = Depends(get_store),
) -> Review:
    """Add a review and recompute the experience's rating."""
    try:
        return ReviewService(store).add_review(current_user, data)
    except TourismaError as e:
        raise http_error(e) from e


@router.get("/experiences/{experience_id}/reviews", response_model=List[Review])
async def list_reviews(experience_id: str, store: DataStore = Depends(get_store)) -> List[Review]:
    try:
        return ReviewService(store).list_reviews(experience_id)
    except TourismaError as e:
        raise http_error(e) from e
