"""Properties cache - role-aware, filtered view of the property catalog."""

import asyncio
from collections import Counter
from typing import Optional
from idrhub.models.property import HIDDEN_STATUSES, Property
from idrhub.models.search_criteria import SearchCriteria
from idrhub.models.user import Viewer
from idrhub.services.analytics import record_property_view
from idrhub.services.realtime import ChangeFeed, Subscription
from idrhub.services.supabase_client import SupabaseClient
from idrhub.utils.config import AppConfig
from idrhub.utils.errors import SupabaseError
from idrhub.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)

PROPERTY_SELECT = "*, agent:users!properties_agent_id_fkey(*)"


def is_visible_to(prop: Property, viewer: Optional[Viewer]) -> bool:
    """Whether ``viewer`` may see ``prop`` in the catalog.

    Admins see everything. Everyone else never sees booked or sold listings;
    agents additionally see their own unapproved listings.
    """
    if viewer is not None and viewer.is_admin:
        return True
    if prop.status in HIDDEN_STATUSES:
        return False
    if viewer is not None and viewer.is_agent:
        return prop.is_approved or prop.agent_id == viewer.id
    return prop.is_approved


def apply_visibility(query, viewer: Optional[Viewer]):
    """Server-side equivalent of :func:`is_visible_to`."""
    if viewer is not None and viewer.is_admin:
        return query
    if viewer is not None and viewer.is_agent:
        query = query.or_(f"is_approved.eq.true,agent_id.eq.{viewer.id}")
    else:
        query = query.eq("is_approved", True)
    return query.not_.in_("status", list(HIDDEN_STATUSES))


def quote_filter_value(value: str) -> str:
    """Double-quote a value for a PostgREST logic filter such as ``or=(...)``.

    Commas and parentheses would otherwise split the condition list.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def apply_criteria(query, criteria: Optional[SearchCriteria]):
    """AND every supplied criterion onto the query. Falsy values are ignored."""
    if criteria is None:
        return query
    if criteria.location:
        pattern = quote_filter_value(f"%{criteria.location}%")
        query = query.or_(
            f"city.ilike.{pattern},state.ilike.{pattern},address.ilike.{pattern}"
        )
    if criteria.min_price:
        query = query.gte("price", criteria.min_price)
    if criteria.max_price:
        query = query.lte("price", criteria.max_price)
    if criteria.bedrooms:
        query = query.gte("bedrooms", criteria.bedrooms)
    if criteria.bathrooms:
        query = query.gte("bathrooms", criteria.bathrooms)
    if criteria.property_type:
        query = query.eq("property_type", criteria.property_type)
    if criteria.min_sqft:
        query = query.gte("square_feet", criteria.min_sqft)
    if criteria.max_sqft:
        query = query.lte("square_feet", criteria.max_sqft)
    return query


async def fetch_likes_counts(client, property_ids: list[str]) -> dict[str, int]:
    """Count favorites per property id."""
    result = (
        client.table("favorites")
        .select("property_id")
        .in_("property_id", property_ids)
        .execute()
    )
    return dict(Counter(row["property_id"] for row in result.data or []))


async def fetch_property(property_id: str) -> Optional[Property]:
    """Load one property with its agent, or None when it does not exist."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table("properties")
                .select(PROPERTY_SELECT)
                .eq("id", property_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to get property: {e}")
    rows = result.data or []
    return Property.model_validate(rows[0]) if rows else None


class PropertiesStore:
    """Locally cached property list for one viewer and one set of criteria.

    Writes go to Supabase first; the returned row is then spliced into the
    cache. Any change on the properties table triggers a full refetch.
    """

    def __init__(
        self,
        viewer: Optional[Viewer] = None,
        criteria: Optional[SearchCriteria] = None,
        change_feed: Optional[ChangeFeed] = None,
        limit: int = AppConfig.PROPERTIES_FETCH_LIMIT,
    ):
        self.viewer = viewer
        self.criteria = criteria
        self.limit = limit
        self.properties: list[Property] = []
        self.loading = True
        self.error: Optional[str] = None

        self._change_feed = change_feed or ChangeFeed()
        self._subscription: Optional[Subscription] = None
        self._refetch_tasks: set[asyncio.Task] = set()
        self._generation = 0
        self._closed = False

    async def start(self) -> None:
        await self.fetch_properties()
        await self._subscribe()

    async def set_criteria(self, criteria: Optional[SearchCriteria]) -> None:
        self.criteria = criteria
        await self.fetch_properties()

    async def set_viewer(self, viewer: Optional[Viewer]) -> None:
        self.viewer = viewer
        await self._unsubscribe()
        await self.fetch_properties()
        await self._subscribe()

    async def fetch_properties(self) -> None:
        """Reload the catalog view. Errors land in ``self.error``."""
        if self._closed:
            return

        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        try:
            with log_timing(
                "fetch_properties",
                logger=logger,
                viewer_role=self.viewer.role if self.viewer else "anonymous",
                has_criteria=bool(self.criteria and not self.criteria.is_empty()),
            ):
                async with SupabaseClient() as client:
                    query = client.table("properties").select(PROPERTY_SELECT)
                    query = apply_visibility(query, self.viewer)
                    query = apply_criteria(query, self.criteria)
                    result = query.order("created_at", desc=True).limit(self.limit).execute()
                    rows = result.data or []
                    rows = await self._with_likes(client, rows)
            properties = [Property.model_validate(row) for row in rows]
        except Exception as e:
            if self._is_stale(generation):
                return
            logger.error("Error fetching properties", error=str(e))
            self.error = str(e) or "An error occurred"
            self.loading = False
            return

        if self._is_stale(generation):
            logger.debug("Discarding superseded properties fetch")
            return

        self.properties = properties
        self.loading = False

    async def _with_likes(self, client, rows: list[dict]) -> list[dict]:
        if not rows:
            return rows
        try:
            counts = await fetch_likes_counts(client, [row["id"] for row in rows])
        except Exception as e:
            logger.warning("Likes count enrichment failed", error=str(e), properties=len(rows))
            return rows
        return [{**row, "likes_count": counts.get(row["id"], 0)} for row in rows]

    async def add_property(self, data: dict) -> Property:
        """Insert a listing and prepend the stored row to the cache."""
        async with SupabaseClient() as client:
            try:
                inserted = client.table("properties").insert(data).execute()
                if not inserted.data:
                    raise SupabaseError("Failed to add property: no data returned")
                result = (
                    client.table("properties")
                    .select(PROPERTY_SELECT)
                    .eq("id", inserted.data[0]["id"])
                    .single()
                    .execute()
                )
            except SupabaseError:
                raise
            except Exception as e:
                raise SupabaseError(f"Failed to add property: {e}")

        prop = Property.model_validate(result.data)
        self.properties = [prop] + self.properties
        logger.info(
            "Property added",
            property_id=prop.id,
            agent_id=mask_user_id(prop.agent_id)
        )
        return prop

    async def update_property(self, property_id: str, updates: dict) -> Property:
        """Update a listing and replace it in the cache by id."""
        async with SupabaseClient() as client:
            try:
                client.table("properties").update(updates).eq("id", property_id).execute()
                result = (
                    client.table("properties")
                    .select(PROPERTY_SELECT)
                    .eq("id", property_id)
                    .single()
                    .execute()
                )
            except Exception as e:
                raise SupabaseError(f"Failed to update property {property_id}: {e}")

        prop = Property.model_validate(result.data)
        self.properties = [prop if p.id == property_id else p for p in self.properties]
        logger.info("Property updated", property_id=property_id, fields=sorted(updates))
        return prop

    async def delete_property(self, property_id: str) -> None:
        async with SupabaseClient() as client:
            try:
                client.table("properties").delete().eq("id", property_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to delete property {property_id}: {e}")

        self.properties = [p for p in self.properties if p.id != property_id]
        logger.info("Property deleted", property_id=property_id)

    async def increment_view_count(self, property_id: str) -> bool:
        """Record a detail-page view. Never raises."""
        return await record_property_view(property_id)

    def _on_change(self, payload: dict) -> None:
        logger.debug("Properties change received", event_type=(payload or {}).get("eventType"))
        task = asyncio.create_task(self.fetch_properties())
        self._refetch_tasks.add(task)
        task.add_done_callback(self._refetch_tasks.discard)

    async def _subscribe(self) -> None:
        if self.viewer is None or self._closed:
            return
        try:
            self._subscription = await self._change_feed.subscribe(
                "properties", "properties", self._on_change
            )
        except SupabaseError as e:
            logger.warning("Properties realtime unavailable", error=str(e))

    async def _unsubscribe(self) -> None:
        if self._subscription is not None:
            await self._subscription.unsubscribe()
            self._subscription = None

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    async def close(self) -> None:
        self._closed = True
        await self._unsubscribe()
        for task in list(self._refetch_tasks):
            task.cancel()
        if self._refetch_tasks:
            await asyncio.gather(*self._refetch_tasks, return_exceptions=True)
