"""Tests for best-effort view analytics."""

import pytest
from idrhub.services.analytics import record_card_view, record_property_view


@pytest.mark.unit
@pytest.mark.asyncio
async def test_card_view_uses_lightweight_rpc(supabase):
    assert await record_card_view("p1") is True
    assert supabase.rpc_calls == [("record_card_view", {"property_id": "p1"})]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_property_view_failure_is_swallowed(supabase):
    supabase.fail("rpc", "record_property_view_with_count")

    assert await record_property_view("p1") is False
