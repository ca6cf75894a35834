"""
Message template endpoints for API v1.

Administrators list and edit the texts of the automatic welcome
messages.  Deleting a template restores its default text.
"""

from typing import List

from fastapi import APIRouter, Depends

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import require_roles
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.message import MessageTemplate, MessageTemplateUpdate
from tourisma_api.app.schemas.user import User, UserRole
from tourisma_api.app.services.message_service import TemplateService


router = APIRouter()


@router.get("/", response_model=List[MessageTemplate])
async def list_templates(
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> List[MessageTemplate]:
    return TemplateService(store).list_templates()


@router.get("/{key}", response_model=MessageTemplate)
async def get_template(
    key: str,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> MessageTemplate:
    try:
        return TemplateService(store).get_template(key)
    except TourismaError as e:
        raise http_error(e) from e


@router.put("/{key}", response_model=MessageTemplate)
async def update_template(
    key: str,
    data: MessageTemplateUpdate,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> MessageTemplate:
    """Replace a template's text.  Placeholders are checked against the template's fields."""
    try:
        return TemplateService(store).upsert_template(key, data.content)
    except TourismaError as e:
        raise http_error(e) from e


@router.delete("/{key}", response_model=MessageTemplate)
async def reset_template(
    key: str,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> MessageTemplate:
    try:
        return TemplateService(store).reset_template(key)
    except TourismaError as e:
        raise http_error(e) from e
