"""Property listing model."""

from typing import Optional
from pydantic import BaseModel, Field

from idrhub.models.user import User

# Statuses that take a listing off the public catalog
HIDDEN_STATUSES = ("booked", "sold")


class Property(BaseModel):
    """Real estate listing as rendered by the client."""
    id: str = Field(..., description="Property ID")
    title: str = Field(default="", description="Listing title")
    description: Optional[str] = Field(None, description="Listing description")
    price: float = Field(default=0, description="Asking price")
    address: Optional[str] = Field(None, description="Street address")
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    bedrooms: Optional[int] = Field(None, description="Number of bedrooms")
    bathrooms: Optional[float] = Field(None, description="Number of bathrooms")
    square_feet: Optional[float] = Field(None, description="Built area in square feet")
    lot_size: Optional[float] = None
    year_built: Optional[int] = None
    property_type: Optional[str] = Field(None, description="house, condo, apartment, villa, ...")
    status: str = Field(default="available", description="available, pending, booked, sold, rented")
    features: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list, description="Storage keys or URLs")
    virtual_tour_url: Optional[str] = None
    agent_id: Optional[str] = Field(None, description="Owning agent user ID")
    agent: Optional[User] = Field(None, description="Joined owning agent")
    view_count: int = Field(default=0, description="Detail page views")
    likes_count: Optional[int] = Field(None, description="Favorites count, None when not enriched")
    inquiries_count: Optional[int] = None
    is_featured: bool = False
    is_approved: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_hidden_status(self) -> bool:
        return self.status in HIDDEN_STATUSES
