"""
In-memory data store.

``DataStore`` holds every collection of the marketplace (users,
partners, experiences, bookings, reviews, conversations, messages and
message templates).  The application builds exactly one store in
``create_app`` and keeps it on ``app.state``; endpoints receive it
through the :func:`get_store` dependency and hand it to the services.
Nothing here is persisted: restarting the process reseeds the fixtures.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional

from fastapi import Request

from ..schemas.booking import Booking
from ..schemas.experience import Experience
from ..schemas.message import Conversation, Message
from ..schemas.partner import Partner
from ..schemas.review import Review
from ..schemas.user import User

logger = logging.getLogger(__name__)

# Id prefix -> name of the collection holding entities with that prefix.
_ID_PREFIXES = {
    "u": "users",
    "p": "partners",
    "e": "experiences",
    "b": "bookings",
    "r": "reviews",
    "c": "conversations",
    "m": "messages",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DataStore:
    """Container for all marketplace collections."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.users: List[User] = []
        self.partners: List[Partner] = []
        self.experiences: List[Experience] = []
        self.bookings: List[Booking] = []
        self.reviews: List[Review] = []
        self.conversations: List[Conversation] = []
        self.messages: List[Message] = []
        self.templates: Dict[str, str] = {}
        self.clock = clock or utc_now
        self._counters: Dict[str, int] = {}

    def now(self) -> datetime:
        return self.clock()

    def today(self) -> date:
        return self.clock().date()

    def new_id(self, prefix: str) -> str:
        """Return the next unused id for ``prefix`` (``"b"`` -> ``"b6"``)."""
        existing = {item.id for item in getattr(self, _ID_PREFIXES[prefix])}
        n = self._counters.get(prefix, 0)
        while True:
            n += 1
            candidate = f"{prefix}{n}"
            if candidate not in existing:
                break
        self._counters[prefix] = n
        return candidate

    def clear(self) -> None:
        for name in _ID_PREFIXES.values():
            getattr(self, name).clear()
        self.templates.clear()
        self._counters.clear()


def init_store(store: Optional[DataStore] = None, seed: bool = True) -> DataStore:
    """Create (or reset) a store and optionally load the demo fixtures."""
    from .fixtures import load_fixtures

    store = store or DataStore()
    store.clear()
    if seed:
        load_fixtures(store)
        logger.info(
            "Store seeded: %s users, %s partners, %s experiences, %s bookings",
            len(store.users),
            len(store.partners),
            len(store.experiences),
            len(store.bookings),
        )
    return store


def get_store(request: Request) -> DataStore:
    """FastAPI dependency returning the application's store."""
    return request.app.state.store
