"""Property details page."""

import logging
from typing import Optional
from idrhub.models.property import Property
from idrhub.models.user import Viewer
from idrhub.services.analytics import record_property_view
from idrhub.services.properties import fetch_property

logger = logging.getLogger(__name__)


class PropertyDetailsPage:
    """Loads one listing and counts the view once per page load.

    Only signed-in viewers are counted. The counter is best-effort and
    never blocks rendering.
    """

    def __init__(self, viewer: Optional[Viewer] = None):
        self.viewer = viewer
        self.property: Optional[Property] = None
        self.error: Optional[str] = None
        self.loading = True
        self.view_recorded = False

    async def load(self, property_id: str) -> Optional[Property]:
        self.loading = True
        self.error = None
        try:
            self.property = await fetch_property(property_id)
            if self.property is None:
                self.error = "Property not found"
        except Exception as e:
            logger.error(f"Error loading property {property_id}: {e}")
            self.error = str(e)
        finally:
            self.loading = False

        if self.property is not None and self.viewer is not None and not self.view_recorded:
            self.view_recorded = await record_property_view(self.property.id)
        return self.property
