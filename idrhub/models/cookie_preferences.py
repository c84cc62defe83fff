"""Cookie consent preferences."""

from pydantic import BaseModel, field_validator


class CookiePreferences(BaseModel):
    necessary: bool = True
    analytics: bool = False
    marketing: bool = False
    preferences: bool = False

    @field_validator("necessary")
    @classmethod
    def necessary_always_on(cls, value: bool) -> bool:
        return True

    @classmethod
    def all_accepted(cls) -> "CookiePreferences":
        return cls(analytics=True, marketing=True, preferences=True)

    @classmethod
    def minimal(cls) -> "CookiePreferences":
        return cls()
