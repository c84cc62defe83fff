"""Favorite join model."""

from typing import Optional
from pydantic import BaseModel, Field

from idrhub.models.property import Property


class Favorite(BaseModel):
    """Link between a user and a saved property."""
    id: Optional[str] = None
    user_id: str = Field(..., description="Owning user ID")
    property_id: str = Field(..., description="Saved property ID")
    created_at: Optional[str] = None
    property: Optional[Property] = Field(None, description="Joined property row")
