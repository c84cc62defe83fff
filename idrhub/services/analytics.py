"""Best-effort view analytics. Failures are logged, never raised."""

from idrhub.services.supabase_client import SupabaseClient
from idrhub.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


async def _call_view_rpc(function_name: str, property_id: str) -> bool:
    try:
        async with SupabaseClient() as client:
            client.rpc(function_name, {"property_id": property_id}).execute()
        return True
    except Exception as e:
        logger.warning(
            "Error recording property view",
            rpc=function_name,
            property_id=property_id,
            error=str(e)
        )
        return False


async def record_card_view(property_id: str) -> bool:
    """Record that a property card was shown. Does not touch view_count."""
    return await _call_view_rpc("record_card_view", property_id)


async def record_property_view(property_id: str) -> bool:
    """Increment view_count and record a detailed view event in one call."""
    return await _call_view_rpc("record_property_view_with_count", property_id)
