"""Search page - URL query <-> criteria, backed by a PropertiesStore."""

from typing import Optional
from idrhub.models.search_criteria import SearchCriteria
from idrhub.models.user import Viewer
from idrhub.services.properties import PropertiesStore
from idrhub.services.search_params import build_query_string, parse_search_params


class SearchPage:
    def __init__(self, viewer: Optional[Viewer] = None, store: Optional[PropertiesStore] = None):
        self.store = store or PropertiesStore(viewer=viewer)
        self.query_string = ""

    @property
    def criteria(self) -> Optional[SearchCriteria]:
        return self.store.criteria

    async def load(self, query_string: str = "") -> None:
        """Mount with the address bar's query string."""
        self.query_string = query_string
        self.store.criteria = parse_search_params(query_string)
        await self.store.start()

    async def handle_search(self, criteria: SearchCriteria) -> str:
        """Apply new criteria and return the query string for the address bar."""
        self.query_string = build_query_string(criteria)
        await self.store.set_criteria(criteria)
        return self.query_string

    async def clear_search(self) -> None:
        self.query_string = ""
        await self.store.set_criteria(SearchCriteria())

    async def close(self) -> None:
        await self.store.close()
