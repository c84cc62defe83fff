"""Search criteria - a transient, client-only filter."""

from typing import Optional
from pydantic import BaseModel

# Order matches the search form and the URL query string
CRITERIA_FIELDS = (
    "location",
    "min_price",
    "max_price",
    "bedrooms",
    "bathrooms",
    "property_type",
    "min_sqft",
    "max_sqft",
)

INTEGER_FIELDS = frozenset(CRITERIA_FIELDS) - {"location", "property_type"}


class SearchCriteria(BaseModel):
    location: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    property_type: Optional[str] = None
    min_sqft: Optional[int] = None
    max_sqft: Optional[int] = None

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in CRITERIA_FIELDS)
