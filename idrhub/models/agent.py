"""Agent model - a user with reputation attributes and derived rating."""

from typing import Optional
from pydantic import Field

from idrhub.models.review import Review
from idrhub.models.user import User

DEFAULT_COMMISSION_RATE = 2.5


class Agent(User):
    """Denormalized agent view built client-side from agents, users and reviews."""
    role: str = Field(default="agent")
    license_number: str = ""
    bio: str = ""
    experience_years: int = 0
    specializations: list[str] = Field(default_factory=list)
    verified: bool = False
    rating: float = Field(default=0.0, description="Mean of loaded review ratings, 0 when none")
    total_sales: int = 0
    commission_rate: float = DEFAULT_COMMISSION_RATE
    reviews: list[Review] = Field(default_factory=list)
    review_count: int = 0
    latest_review: Optional[Review] = None
