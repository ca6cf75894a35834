"""
Demo session endpoints.

Logging in means picking a role; the first user holding that role is
returned together with a bearer token for subsequent requests.
"""

from fastapi import APIRouter, Depends

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import create_access_token, get_current_user
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.user import LoginRequest, SessionRead, User
from tourisma_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/login", response_model=SessionRead)
async def login(data: LoginRequest, store: DataStore = Depends(get_store)) -> SessionRead:
    """Log in as the demo user of the requested role."""
    try:
        user = UserService(store).login(data.role)
    except TourismaError as e:
        raise http_error(e) from e
    return SessionRead(access_token=create_access_token({"sub": user.id}), user=user)


@router.get("/me", response_model=User)
async def read_me(current_user: User = Depends(get_current_user)) -> User:
    return current_user

