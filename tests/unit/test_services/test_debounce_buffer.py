"""Tests for debounce buffer service."""

import asyncio
import pytest
from unittest.mock import AsyncMock
from idrhub.services.debounce_buffer import DebounceBuffer


@pytest.mark.unit
@pytest.mark.asyncio
async def test_burst_runs_action_once():
    buffer = DebounceBuffer(window_seconds=0.02)
    action = AsyncMock()

    for _ in range(5):
        buffer.trigger("favorites", action)
    assert buffer.pending("favorites")

    await asyncio.sleep(0.06)

    action.assert_awaited_once()
    assert not buffer.pending()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_keys_are_independent():
    buffer = DebounceBuffer(window_seconds=0.01)
    first = AsyncMock()
    second = AsyncMock()

    buffer.trigger("a", first)
    buffer.trigger("b", second)
    await asyncio.sleep(0.05)

    first.assert_awaited_once()
    second.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_action_error_is_contained():
    buffer = DebounceBuffer(window_seconds=0.01)
    failing = AsyncMock(side_effect=RuntimeError("boom"))
    ok = AsyncMock()

    buffer.trigger("a", failing)
    await asyncio.sleep(0.03)
    buffer.trigger("a", ok)
    await asyncio.sleep(0.03)

    failing.assert_awaited_once()
    ok.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_cancel_all_drops_pending():
    buffer = DebounceBuffer(window_seconds=0.05)
    action = AsyncMock()

    buffer.trigger("a", action)
    await buffer.cancel_all()
    await asyncio.sleep(0.08)

    action.assert_not_awaited()
    assert buffer.timers == {}
