"""Public property search endpoint."""

import json
import asyncio
import logging
from idrhub.services.properties import PropertiesStore
from idrhub.services.search_params import parse_search_params
from idrhub.utils.logging import correlation_context
from idrhub.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = logging.getLogger(__name__)


async def search_properties(query_params: dict) -> dict:
    """Run an anonymous catalog fetch for the given query parameters."""
    criteria = parse_search_params(query_params)
    store = PropertiesStore(viewer=None, criteria=criteria)
    try:
        await store.fetch_properties()
    finally:
        await store.close()

    if store.error:
        raise RuntimeError(store.error)

    return {
        "criteria": criteria.model_dump(exclude_none=True),
        "count": len(store.properties),
        "properties": [p.model_dump(mode="json") for p in store.properties],
    }


def handler(request):
    """
    Search the public catalog.

    Query parameters mirror the search page URL: location, min_price,
    max_price, bedrooms, bathrooms, property_type, min_sqft, max_sqft.
    """
    with correlation_context():
        try:
            query_params = request.get("query", {}) or {}

            payload = asyncio.run(search_properties(query_params))

            return {
                "statusCode": 200,
                "headers": {"Content-Type": "application/json"},
                "body": json.dumps(payload)
            }

        except Exception as e:
            logger.error(f"Error searching properties: {e}", exc_info=True)
            return {
                "statusCode": 500,
                "headers": {"Content-Type": "application/json"},
                "body": json.dumps({"error": str(e)})
            }
