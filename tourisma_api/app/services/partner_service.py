"""
Business logic for partners: lookups, moderation and applications.

A partner's ``status`` decides whether its experiences appear in
discovery listings.  There is no visibility flag stored on the
experiences themselves; every listing re-derives it from
:meth:`PartnerService.active_partner_ids`.
"""

import logging
from typing import List, Optional, Set

from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationFailedError
from ..core.store import DataStore
from ..schemas.partner import Partner, PartnerApplication, PartnerStatus, PartnerUpdate
from ..schemas.user import User, UserRole

logger = logging.getLogger(__name__)


class PartnerService:
    """Service for partner accounts."""

    def __init__(self, store: DataStore) -> None:
        self.store = store

    @property
    def support_partner_id(self) -> str:
        return settings.support_partner_id

    def get_partner(self, partner_id: str) -> Optional[Partner]:
        return next((p for p in self.store.partners if p.id == partner_id), None)

    def get_partner_or_404(self, partner_id: str) -> Partner:
        partner = self.get_partner(partner_id)
        if partner is None:
            raise NotFoundError(f"Partner {partner_id} not found")
        return partner

    def get_partner_by_user_id(self, user_id: str) -> Optional[Partner]:
        """First partner owned by ``user_id`` (a user may own several)."""
        return next((p for p in self.store.partners if p.user_id == user_id), None)

    def list_partners_for_user(self, user_id: str) -> List[Partner]:
        return [p for p in self.store.partners if p.user_id == user_id]

    def get_support_partner(self) -> Partner:
        partner = self.get_partner(self.support_partner_id)
        if partner is None:
            raise NotFoundError("Support partner is not configured")
        return partner

    def list_partners(self, search: Optional[str] = None, include_support: bool = False) -> List[Partner]:
        """List partners for the moderation screen, filtered by company name."""
        term = (search or "").strip().lower()
        return [
            p
            for p in self.store.partners
            if (include_support or p.id != self.support_partner_id)
            and term in p.company_name.lower()
        ]

    def active_partner_ids(self) -> Set[str]:
        return {p.id for p in self.store.partners if p.status == PartnerStatus.ACTIVE}

    def ensure_can_manage(self, user: User, partner_id: str) -> Partner:
        """Return the partner if ``user`` owns it or is an admin."""
        partner = self.get_partner_or_404(partner_id)
        if user.role != UserRole.ADMIN and partner.user_id != user.id:
            raise PermissionDeniedError(f"User {user.id} cannot manage partner {partner_id}")
        return partner

    def update_partner_status(self, partner_id: str, status: PartnerStatus) -> Partner:
        """Set the moderation status of a partner.

        The support pseudo-partner is always active and cannot be
        re-statused.  Suspending a partner hides its experiences from
        listings but keeps them in the store.
        """
        partner = self.get_partner_or_404(partner_id)
        if partner.id == self.support_partner_id:
            raise ValidationFailedError("The support partner status cannot be changed")
        previous = partner.status
        partner.status = status
        logger.info("Partner %s status %s -> %s", partner_id, previous.value, status.value)
        return partner

    def update_partner(self, partner_id: str, updates: PartnerUpdate) -> Partner:
        partner = self.get_partner_or_404(partner_id)
        changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(partner, field, value)
        logger.info("Partner %s updated: %s", partner_id, sorted(changes))
        return partner

    def apply(self, application: PartnerApplication) -> Partner:
        """Register a partner application.

        Creates a user with role ``PARTNER`` and a partner row in status
        ``PENDING``; an administrator activates it later.
        """
        email = application.email.strip().lower()
        if any(u.email.lower() == email for u in self.store.users):
            raise ConflictError(f"A user with email {email} already exists")
        user = User(
            id=self.store.new_id("u"),
            name=application.name,
            email=email,
            role=UserRole.PARTNER,
            phone=application.phone,
        )
        self.store.users.append(user)
        partner = Partner(
            id=self.store.new_id("p"),
            user_id=user.id,
            company_name=application.company_name,
            description=application.description,
            city=application.city,
            phone=application.phone,
            status=PartnerStatus.PENDING,
            join_date=self.store.today(),
            rating=0.0,
        )
        self.store.partners.append(partner)
        logger.info("Partner application %s received from %s", partner.id, email)
        return partner
