"""
Application package initializer.

Each domain (bookings, partners, conversations, ...) keeps its schemas
in ``schemas``, its business rules in ``services`` and exposes a router
defined in ``api/v1/endpoints``.  Versioning is handled by grouping
routers under the ``api/<version>/`` hierarchy.
"""

from .main import app  # noqa: F401
