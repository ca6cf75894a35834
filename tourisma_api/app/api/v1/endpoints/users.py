"""
User endpoints for API v1.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import get_current_user, require_roles
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.user import User, UserRole
from tourisma_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/", response_model=List[User])
async def list_users(
    role: Optional[UserRole] = Query(None),
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> List[User]:
    """List users, optionally filtered by role.  Admins only."""
    return UserService(store).list_users(role)


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> User:
    try:
        return UserService(store).get_user_or_404(user_id)
    except TourismaError as e:
        raise http_error(e) from e
