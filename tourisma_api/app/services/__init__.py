"""
Service layer.

Each service wraps the shared :class:`~tourisma_api.app.core.store.DataStore`
and holds the business rules for one domain.  Services are cheap to
build; endpoints create one per request around the application store.
"""
