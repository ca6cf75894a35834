"""
Pydantic models for users and demo sessions.

Tourisma has no passwords: a visitor picks a demo role and is logged in
as the first fixture user holding that role.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    CLIENT = "CLIENT"
    PARTNER = "PARTNER"
    ADMIN = "ADMIN"


class User(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    avatar_url: Optional[str] = None
    phone: Optional[str] = None


class LoginRequest(BaseModel):
    """Schema for a demo login: only the role is chosen."""

    role: UserRole = Field(..., description="Demo role to log in as")


class SessionRead(BaseModel):
    """Token and user returned by a successful login."""

    access_token: str
    token_type: str = "bearer"
    user: User


class UnreadCount(BaseModel):
    unread: int
