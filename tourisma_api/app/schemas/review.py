"""
Pydantic schemas for experience reviews.

Reviews feed the experience's aggregate rating.  A reviewer may point at
the completed booking being reviewed so the booking can be flagged and
not reviewed twice.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Review(BaseModel):
    id: str
    experience_id: str
    user_id: str
    user_name: str
    rating: int
    comment: str = ""
    date: dt.date


class ReviewCreate(BaseModel):
    """Schema for submitting a review."""

    experience_id: str
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: str = ""
    booking_id: Optional[str] = Field(None, description="Completed booking being reviewed")

    @field_validator("comment")
    @classmethod
    def sanitize_comment(cls, v: str) -> str:
        """Trim whitespace and enforce a maximum length."""
        v = (v or "").strip()
        if len(v) > 1000:
            raise ValueError("Comment must be 1000 characters or fewer")
        return v
