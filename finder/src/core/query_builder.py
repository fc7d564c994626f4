from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from constants.tmdb import DISCOVER_PATH, DISCOVER_SORT, SEARCH_PATH
from core.filters import FilterState


@dataclass(frozen=True)
class PageRequest:
    path: str
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def page(self) -> int:
        return self.params["page"]

    @property
    def is_search(self) -> bool:
        return self.path == SEARCH_PATH


class QueryBuilder:
    """Turns a filter state and a page number into exactly one TMDB list request.

    A non-empty search term targets /search/movie with only ``query`` and
    ``page``: that endpoint ignores genre and provider filters, so they are
    not sent. Otherwise /discover/movie is used with the structured filters.
    """

    def __init__(self, region: Optional[str] = None, provider_ids: Mapping[str, int] | None = None):
        self.region = region
        self.provider_ids: dict[str, int] = dict(provider_ids or {})

    def set_provider_catalog(self, provider_ids: Mapping[str, int]) -> None:
        self.provider_ids = dict(provider_ids)

    def build(self, filters: FilterState, page: int = 1) -> PageRequest:
        if page < 1:
            raise ValueError(f"Page must be >= 1, got {page}")

        if filters.is_text_search:
            return PageRequest(SEARCH_PATH, {"query": filters.query, "page": page})

        params: dict[str, Any] = {}
        if filters.year_range:
            params["primary_release_date.gte"] = filters.year_range.lower_bound
            params["primary_release_date.lte"] = filters.year_range.upper_bound
        if filters.genre_ids:
            params["with_genres"] = ",".join(str(g) for g in filters.genre_ids)
        if filters.provider_names:
            # Names missing from the catalog are sent as-is
            params["with_watch_providers"] = ",".join(
                str(self.provider_ids.get(name, name)) for name in filters.provider_names
            )
            if self.region:
                params["watch_region"] = self.region
        params["sort_by"] = DISCOVER_SORT
        params["page"] = page
        return PageRequest(DISCOVER_PATH, params)
