"""
Statistics endpoints for API v1.

Admins read the platform overview; partners read the metrics of their
own partner accounts.
"""

from fastapi import APIRouter, Depends

from tourisma_api.app.core.exceptions import TourismaError, http_error
from tourisma_api.app.core.security import require_roles
from tourisma_api.app.core.store import DataStore, get_store
from tourisma_api.app.schemas.statistics import AdminOverview, PartnerMetrics
from tourisma_api.app.schemas.user import User, UserRole
from tourisma_api.app.services.partner_service import PartnerService
from tourisma_api.app.services.statistics_service import StatisticsService


router = APIRouter()


@router.get("/overview", response_model=AdminOverview)
async def overview(
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> AdminOverview:
    return StatisticsService(store).overview()


@router.get("/partners/{partner_id}", response_model=PartnerMetrics)
async def partner_metrics(
    partner_id: str,
    current_user: User = Depends(require_roles(UserRole.PARTNER, UserRole.ADMIN)),
    store: DataStore = Depends(get_store),
) -> PartnerMetrics:
    try:
        PartnerService(store).ensure_can_manage(current_user, partner_id)
        return StatisticsService(store).partner_metrics(partner_id)
    except TourismaError as e:
        raise http_error(e) from e
