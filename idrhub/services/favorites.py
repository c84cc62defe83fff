"""Favorites cache - the signed-in user's saved properties."""

import time
from typing import Optional
from idrhub.models.favorite import Favorite
from idrhub.models.property import Property
from idrhub.services.debounce_buffer import DebounceBuffer
from idrhub.services.realtime import ChangeFeed, Subscription
from idrhub.services.supabase_client import SupabaseClient
from idrhub.utils.config import AppConfig
from idrhub.utils.errors import SupabaseError
from idrhub.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)

FAVORITES_SELECT = "*, property:properties(*, agent:users!properties_agent_id_fkey(*))"


class FavoritesStore:
    """Locally cached favorites for one user, kept fresh by a realtime feed.

    Adding a favorite only writes remotely; the new row shows up on the next
    fetch, which the realtime subscription schedules. Removing a favorite
    drops it from the cache as soon as the delete succeeds.
    """

    def __init__(
        self,
        user_id: Optional[str] = None,
        change_feed: Optional[ChangeFeed] = None,
        min_fetch_interval: float = AppConfig.FAVORITES_MIN_FETCH_INTERVAL_SECONDS,
        refetch_delay: float = AppConfig.FAVORITES_REFETCH_DELAY_SECONDS,
    ):
        self.user_id = user_id
        self.favorites: list[Property] = []
        self.loading = True
        self.error: Optional[str] = None

        self.min_fetch_interval = min_fetch_interval
        self._last_fetch: Optional[float] = None
        self._change_feed = change_feed or ChangeFeed()
        self._subscription: Optional[Subscription] = None
        self._debounce = DebounceBuffer(window_seconds=refetch_delay)
        self._generation = 0
        self._closed = False

    async def start(self) -> None:
        """Initial load for the user given at construction."""
        await self.set_user(self.user_id)

    async def set_user(self, user_id: Optional[str]) -> None:
        """Switch identity: refetch and resubscribe, or clear when signed out."""
        self._generation += 1
        self.user_id = user_id
        await self._unsubscribe()
        await self._debounce.cancel_all()
        self._last_fetch = None

        if not user_id:
            self.favorites = []
            self.loading = False
            self.error = None
            return

        await self.fetch_favorites()
        await self._subscribe()

    async def fetch_favorites(self) -> None:
        """Reload favorites unless a fetch started within the throttle interval."""
        if not self.user_id or self._closed:
            return

        now = time.monotonic()
        if self._last_fetch is not None and now - self._last_fetch < self.min_fetch_interval:
            logger.debug(
                "Favorites fetch skipped by throttle",
                user_id=mask_user_id(self.user_id),
                seconds_since_last_fetch=round(now - self._last_fetch, 3)
            )
            return

        generation = self._generation
        user_id = self.user_id
        self.loading = True
        self.error = None
        self._last_fetch = now

        try:
            with log_timing("fetch_favorites", logger=logger, user_id=mask_user_id(user_id)):
                async with SupabaseClient() as client:
                    result = (
                        client.table("favorites")
                        .select(FAVORITES_SELECT)
                        .eq("user_id", user_id)
                        .order("created_at", desc=True)
                        .execute()
                    )
            rows = result.data or []
            saved = [Favorite.model_validate(row) for row in rows]
            favorites = [f.property for f in saved if f.property is not None]
        except Exception as e:
            if self._is_stale(generation):
                return
            logger.error("Error fetching favorites", user_id=mask_user_id(user_id), error=str(e))
            self.error = str(e) or "An error occurred"
            self.loading = False
            return

        if self._is_stale(generation):
            logger.debug("Discarding favorites fetch for a stale store", user_id=mask_user_id(user_id))
            return

        self.favorites = favorites
        self.loading = False

    async def add_to_favorites(self, property_id: str) -> None:
        """Insert the (user, property) pair. The cache catches up via realtime."""
        if not self.user_id:
            return

        async with SupabaseClient() as client:
            try:
                client.table("favorites").insert({
                    "user_id": self.user_id,
                    "property_id": property_id,
                }).execute()
            except Exception as e:
                logger.error(
                    "Error adding to favorites",
                    user_id=mask_user_id(self.user_id),
                    property_id=property_id,
                    error=str(e)
                )
                raise SupabaseError(f"Failed to add favorite: {e}")

        logger.info("Favorite added", user_id=mask_user_id(self.user_id), property_id=property_id)

    async def remove_from_favorites(self, property_id: str) -> None:
        """Delete the pair remotely, then drop it from the cache."""
        if not self.user_id:
            return

        async with SupabaseClient() as client:
            try:
                (
                    client.table("favorites")
                    .delete()
                    .eq("user_id", self.user_id)
                    .eq("property_id", property_id)
                    .execute()
                )
            except Exception as e:
                logger.error(
                    "Error removing from favorites",
                    user_id=mask_user_id(self.user_id),
                    property_id=property_id,
                    error=str(e)
                )
                raise SupabaseError(f"Failed to remove favorite: {e}")

        self.favorites = [p for p in self.favorites if p.id != property_id]
        logger.info("Favorite removed", user_id=mask_user_id(self.user_id), property_id=property_id)

    def is_favorite(self, property_id: str) -> bool:
        return any(p.id == property_id for p in self.favorites)

    def _on_change(self, payload: dict) -> None:
        logger.debug(
            "Favorites change received",
            user_id=mask_user_id(self.user_id),
            event_type=(payload or {}).get("eventType")
        )
        self._debounce.trigger("favorites", self.fetch_favorites)

    async def _subscribe(self) -> None:
        if not self.user_id or self._closed:
            return
        try:
            self._subscription = await self._change_feed.subscribe(
                "favorites",
                "favorites",
                self._on_change,
                filter=f"user_id=eq.{self.user_id}",
            )
        except SupabaseError as e:
            # Cache still works, it just won't refresh on its own
            logger.warning("Favorites realtime unavailable", user_id=mask_user_id(self.user_id), error=str(e))

    async def _unsubscribe(self) -> None:
        if self._subscription is not None:
            await self._subscription.unsubscribe()
            self._subscription = None

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    async def close(self) -> None:
        """Teardown: stop the feed, drop pending refetches, ignore late results."""
        self._closed = True
        self._generation += 1
        await self._unsubscribe()
        await self._debounce.cancel_all()
