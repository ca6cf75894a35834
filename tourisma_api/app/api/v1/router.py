"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.  When
a domain is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    bookings,
    conversations,
    experiences,
    messages,
    partners,
    reviews,
    session,
    statistics,
    templates,
    users,
)

router = APIRouter()

router.include_router(session.router, prefix="/session", tags=["session"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(partners.router, prefix="/partners", tags=["partners"])
router.include_router(experiences.router, prefix="/experiences", tags=["experiences"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
# Reviews are posted to /reviews and listed under /experiences/{id}/reviews.
router.include_router(reviews.router, tags=["reviews"])
router.include_router(conversations.router, prefix="/conversations", tags=["conversations"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
router.include_router(templates.router, prefix="/templates", tags=["templates"])
router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
