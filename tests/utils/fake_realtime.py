"""Change feed double that lets tests emit realtime events by hand."""

from typing import Optional


class FakeSubscription:
    def __init__(self, feed: "FakeChangeFeed", entry: dict):
        self._feed = feed
        self._entry = entry
        self.active = True

    async def unsubscribe(self) -> None:
        self.active = False
        if self._entry in self._feed.subscriptions:
            self._feed.subscriptions.remove(self._entry)


class FakeChangeFeed:
    def __init__(self):
        self.subscriptions: list[dict] = []

    async def subscribe(self, channel_name, table, callback, filter: Optional[str] = None, event: str = "*"):
        entry = {"channel": channel_name, "table": table, "callback": callback, "filter": filter}
        self.subscriptions.append(entry)
        return FakeSubscription(self, entry)

    def emit(self, table: str, event_type: str = "INSERT", record: Optional[dict] = None) -> int:
        """Deliver an event to every subscriber of ``table``; returns how many got it."""
        payload = {"eventType": event_type, "table": table, "new": record or {}, "old": {}}
        delivered = 0
        for entry in list(self.subscriptions):
            if entry["table"] == table:
                entry["callback"](payload)
                delivered += 1
        return delivered
