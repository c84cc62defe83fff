"""Favorites page and the favorite toggle shared with property cards."""

import logging
from typing import Optional
from idrhub.models.property import Property
from idrhub.models.user import Viewer
from idrhub.services.favorites import FavoritesStore
from idrhub.services.notifier import Notifier
from idrhub.utils.errors import SupabaseError

logger = logging.getLogger(__name__)


async def toggle_favorite(
    store: FavoritesStore,
    viewer: Optional[Viewer],
    property_id: str,
    notifier: Notifier,
) -> Optional[bool]:
    """Add or remove ``property_id``. Returns the intended new state, or None
    when nothing was sent."""
    if viewer is None:
        notifier.error("Please sign in to save favorites")
        return None

    try:
        if store.is_favorite(property_id):
            await store.remove_from_favorites(property_id)
            notifier.success("Removed from favorites")
            return False
        await store.add_to_favorites(property_id)
        notifier.success("Added to favorites")
        return True
    except SupabaseError as e:
        logger.error(f"Favorite toggle failed for {property_id}: {e}")
        notifier.error("Failed to update favorites")
        return None


class FavoritesPage:
    def __init__(self, viewer: Optional[Viewer], store: Optional[FavoritesStore] = None):
        self.viewer = viewer
        self.store = store or FavoritesStore(user_id=viewer.id if viewer else None)
        self.notifier = Notifier()

    @property
    def favorites(self) -> list[Property]:
        return self.store.favorites

    async def load(self) -> None:
        await self.store.start()

    async def toggle(self, property_id: str) -> Optional[bool]:
        return await toggle_favorite(self.store, self.viewer, property_id, self.notifier)

    async def close(self) -> None:
        await self.store.close()
