"""Debounce buffer - coalesce bursts of triggers into one delayed action per key."""

import asyncio
from typing import Awaitable, Callable, Optional
from idrhub.utils.config import AppConfig
from idrhub.utils.logging import get_structured_logger, get_correlation_id

logger = get_structured_logger(__name__)

Action = Callable[[], Awaitable[None]]


class DebounceBuffer:
    """Run an action once a key has been quiet for ``window_seconds``.

    Each trigger resets the key's timer. Errors raised by the action are
    logged; the buffer keeps serving other keys.
    """

    def __init__(self, window_seconds: float = AppConfig.FAVORITES_REFETCH_DELAY_SECONDS):
        self.window_seconds = window_seconds
        self.triggers: dict[str, int] = {}  # key -> triggers since last flush
        self.timers: dict[str, asyncio.Task] = {}
        logger.debug(
            "DebounceBuffer initialized",
            debounce_window_seconds=window_seconds
        )

    def trigger(self, key: str, action: Action) -> None:
        """Schedule ``action`` for ``key``, replacing any pending timer."""
        self.triggers[key] = self.triggers.get(key, 0) + 1

        pending = self.timers.get(key)
        if pending is not None and not pending.done():
            pending.cancel()
            logger.debug(
                "Debounce timer reset",
                correlation_id=get_correlation_id(),
                debounce_key=key,
                triggers_pending=self.triggers[key]
            )

        self.timers[key] = asyncio.create_task(self._run_after_delay(key, action))

    def pending(self, key: Optional[str] = None) -> bool:
        if key is not None:
            task = self.timers.get(key)
            return task is not None and not task.done()
        return any(not task.done() for task in self.timers.values())

    async def _run_after_delay(self, key: str, action: Action) -> None:
        await asyncio.sleep(self.window_seconds)

        triggers = self.triggers.pop(key, 0)
        self.timers.pop(key, None)

        logger.debug(
            "Debounce window elapsed",
            debounce_key=key,
            triggers_coalesced=triggers,
            debounce_window_seconds=self.window_seconds
        )

        try:
            await action()
        except Exception as e:
            logger.error(
                "Debounced action failed",
                debounce_key=key,
                error=str(e),
                exc_info=True
            )

    async def cancel_all(self) -> None:
        """Cancel every pending timer and wait for them to unwind."""
        tasks = [task for task in self.timers.values() if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.timers.clear()
        self.triggers.clear()
