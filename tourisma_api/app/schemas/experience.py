"""
Pydantic models for experiences (bookable listings).

Listings must always carry at least one picture and picture URLs must be
absolute ``http``/``https`` links; both rules are enforced here so the
service layer only ever stores valid listings.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _check_images(images: List[str]) -> List[str]:
    cleaned = [url.strip() for url in images if url and url.strip()]
    if not cleaned:
        raise ValueError("At least one image is required")
    for url in cleaned:
        if not url.startswith("http"):
            raise ValueError(f"Image URL must start with http: {url}")
    return cleaned


class Experience(BaseModel):
    id: str
    partner_id: str
    title: str
    category: str
    description: str = ""
    price: float
    duration: str
    location: str
    images: List[str]
    max_guests: int
    rating: float = 5.0
    reviews_count: int = 0
    is_active: bool = True
    included: List[str] = Field(default_factory=list)
    views: int = 0


class ExperienceCreate(BaseModel):
    """Schema for publishing a new experience."""

    title: str = Field(..., min_length=1)
    category: str = Field("Aventure", min_length=1)
    description: str = ""
    price: float = Field(..., ge=0)
    duration: str = ""
    location: str = Field(..., min_length=1)
    images: List[str] = Field(..., description="Picture URLs, at least one")
    max_guests: int = Field(10, ge=1)
    included: List[str] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: List[str]) -> List[str]:
        return _check_images(v)


class ExperienceUpdate(BaseModel):
    """Partial update of a listing; omitted fields keep their value."""

    title: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    duration: Optional[str] = None
    location: Optional[str] = None
    images: Optional[List[str]] = None
    max_guests: Optional[int] = Field(None, ge=1)
    included: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return _check_images(v)
