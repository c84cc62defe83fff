"""Realtime change-feed subscriptions over Supabase postgres_changes."""

from typing import Any, Callable, Optional
from idrhub.services.supabase_client import current_access_token, get_realtime_client
from idrhub.utils.errors import SupabaseError
from idrhub.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

ChangeCallback = Callable[[dict], Any]


class Subscription:
    """Handle for one subscribed channel."""

    def __init__(self, client, channel, table: str):
        self._client = client
        self._channel = channel
        self.table = table
        self.active = True

    async def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        await self._client.remove_channel(self._channel)
        logger.debug("Realtime channel removed", table=self.table)


class ChangeFeed:
    """Subscribes callbacks to insert/update/delete events on a table.

    Callbacks receive the raw payload dict and are invoked on the event loop
    that owns the realtime client. Every subscribe first authorizes the
    realtime socket with the current session token.
    """

    def __init__(self, client=None):
        self._client = client

    async def _get_client(self):
        if self._client is None:
            self._client = await get_realtime_client()
        return self._client

    async def subscribe(
        self,
        channel_name: str,
        table: str,
        callback: ChangeCallback,
        filter: Optional[str] = None,
        event: str = "*",
    ) -> Subscription:
        client = await self._get_client()
        try:
            await client.realtime.set_auth(current_access_token())
            channel = client.channel(channel_name)
            channel.on_postgres_changes(
                event,
                callback,
                table=table,
                schema="public",
                filter=filter,
            )
            await channel.subscribe()
        except Exception as e:
            raise SupabaseError(f"Failed to subscribe to {table} changes: {e}")

        logger.info(
            "Realtime channel subscribed",
            channel=channel_name,
            table=table,
            change_filter=filter,
        )
        return Subscription(client, channel, table)
