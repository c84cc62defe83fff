"""Cookie consent banner state, persisted in local storage."""

import logging
from typing import Optional
from pydantic import ValidationError
from idrhub.models.cookie_preferences import CookiePreferences
from idrhub.services.local_storage import LocalStorage

logger = logging.getLogger(__name__)

CONSENT_KEY = "cookie-consent"
TOGGLEABLE = ("analytics", "marketing", "preferences")


class CookieConsent:
    """Consent choice for this browser profile.

    ``selection`` is the in-progress choice shown in the settings panel; only
    the accept/decline/save actions persist anything.
    """

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()
        self.selection = CookiePreferences.minimal()

    def stored_preferences(self) -> Optional[CookiePreferences]:
        raw = self.storage.get_item(CONSENT_KEY)
        if not raw:
            return None
        try:
            return CookiePreferences.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding invalid stored cookie consent: {e}")
            return None

    def should_show_banner(self) -> bool:
        return self.stored_preferences() is None

    def toggle(self, key: str) -> None:
        """Flip one optional category. ``necessary`` cannot be disabled."""
        if key == "necessary":
            return
        if key not in TOGGLEABLE:
            raise KeyError(key)
        current = getattr(self.selection, key)
        self.selection = self.selection.model_copy(update={key: not current})

    def _persist(self, preferences: CookiePreferences) -> CookiePreferences:
        self.storage.set_item(CONSENT_KEY, preferences.model_dump_json())
        logger.info("Cookie consent saved", extra=preferences.model_dump())
        return preferences

    def accept_all(self) -> CookiePreferences:
        return self._persist(CookiePreferences.all_accepted())

    def decline_all(self) -> CookiePreferences:
        return self._persist(CookiePreferences.minimal())

    def save_preferences(self) -> CookiePreferences:
        return self._persist(self.selection)
