"""User and viewer models."""

from typing import Literal, Optional
from pydantic import BaseModel, Field

Role = Literal["buyer", "agent", "admin"]


class User(BaseModel):
    """Row of the users table."""
    id: str = Field(..., description="User ID (auth uid)")
    email: Optional[str] = Field(None, description="Email address")
    full_name: Optional[str] = Field(None, description="Full name")
    avatar_url: Optional[str] = Field(None, description="Avatar storage key or URL")
    phone: Optional[str] = Field(None, description="Phone number")
    role: Role = Field(default="buyer", description="Role: buyer, agent, admin")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Viewer(BaseModel):
    """Signed-in identity that data stores act for. Anonymous is None."""
    id: str = Field(..., description="User ID (auth uid)")
    role: Role = Field(default="buyer", description="Role: buyer, agent, admin")
    full_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_agent(self) -> bool:
        return self.role == "agent"
