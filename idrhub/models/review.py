"""Review model."""

from typing import Optional
from pydantic import BaseModel, Field


class ReviewerInfo(BaseModel):
    full_name: Optional[str] = None


class ReviewedProperty(BaseModel):
    title: Optional[str] = None


class Review(BaseModel):
    """Feedback left for an agent, optionally about one property."""
    id: str = Field(..., description="Review ID")
    agent_id: str = Field(..., description="Reviewed agent ID")
    reviewer_id: Optional[str] = Field(None, description="Reviewing user ID")
    property_id: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5, description="Star rating")
    comment: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    reviewer: Optional[ReviewerInfo] = None
    property: Optional[ReviewedProperty] = None
