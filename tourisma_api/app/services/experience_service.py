"""
Business logic for experiences (listings) and discovery.

Discovery surfaces (home page, search) only show listings whose partner
is ``ACTIVE`` and whose own ``is_active`` flag is set.  The check runs on
every listing call against the current partner statuses.
"""

import logging
from typing import Dict, List, Optional, Set

from ..core.exceptions import NotFoundError
from ..core.store import DataStore
from ..schemas.experience import Experience, ExperienceCreate, ExperienceUpdate
from .partner_service import PartnerService

logger = logging.getLogger(__name__)

# Search city -> additional locations considered part of that city.
CITY_ALIASES: Dict[str, Set[str]] = {
    "marrakech": {"ourika"},
}


class ExperienceService:
    """Service for experience listings."""

    def __init__(self, store: DataStore) -> None:
        self.store = store
        self.partners = PartnerService(store)

    def get_experience(self, experience_id: str) -> Optional[Experience]:
        return next((e for e in self.store.experiences if e.id == experience_id), None)

    def get_experience_or_404(self, experience_id: str) -> Experience:
        experience = self.get_experience(experience_id)
        if experience is None:
            raise NotFoundError(f"Experience {experience_id} not found")
        return experience

    def get_visible_experience_or_404(self, experience_id: str) -> Experience:
        """Like :meth:`get_experience_or_404`, for listings a visitor may see."""
        experience = self.get_experience_or_404(experience_id)
        if not experience.is_active or experience.partner_id not in self.partners.active_partner_ids():
            raise NotFoundError(f"Experience {experience_id} not found")
        return experience

    def record_view(self, experience_id: str) -> Experience:
        experience = self.get_experience_or_404(experience_id)
        experience.views += 1
        return experience

    def list_partner_experiences(self, partner_id: str) -> List[Experience]:
        return [e for e in self.store.experiences if e.partner_id == partner_id]

    def list_active_experiences(self) -> List[Experience]:
        active_ids = self.partners.active_partner_ids()
        return [e for e in self.store.experiences if e.partner_id in active_ids and e.is_active]

    def search(
        self,
        category: Optional[str] = None,
        city: Optional[str] = None,
        max_price: Optional[float] = None,
    ) -> List[Experience]:
        """Filter active listings.

        ``category`` must match exactly; ``city`` matches when it is a
        case-insensitive substring of the location or the location is one
        of the city's aliases; ``max_price`` is inclusive.  ``None`` or
        ``"all"`` disables a filter.
        """
        results = []
        city_term = (city or "").strip().lower()
        for experience in self.list_active_experiences():
            if max_price is not None and experience.price > max_price:
                continue
            if category and category != "all" and experience.category != category:
                continue
            if city_term and city_term != "all":
                location = experience.location.lower()
                if city_term not in location and location not in CITY_ALIASES.get(city_term, set()):
                    continue
            results.append(experience)
        return results

    def add_experience(self, partner_id: str, data: ExperienceCreate) -> Experience:
        self.partners.get_partner_or_404(partner_id)
        experience = Experience(
            id=self.store.new_id("e"),
            partner_id=partner_id,
            rating=5.0,
            reviews_count=0,
            views=0,
            **data.model_dump(),
        )
        self.store.experiences.append(experience)
        logger.info("Experience %s created for partner %s", experience.id, partner_id)
        return experience

    def update_experience(self, experience_id: str, updates: ExperienceUpdate) -> Experience:
        experience = self.get_experience_or_404(experience_id)
        changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(experience, field, value)
        logger.info("Experience %s updated: %s", experience_id, sorted(changes))
        return experience
