from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from core.errors import TMDBError
from core.filters import FilterState, FilterStore
from constants.tmdb import MAX_PAGE
from core.query_builder import QueryBuilder
from models.movie import Genre, Movie, MoviePage, ProviderOption
from services.aggregator import ResultAggregator
from services.tmdb import TMDBClient

logger = logging.getLogger(__name__)

SEARCH_FAILED = "An error occurred while searching movies. Please try again."
YEAR_FILTER_FAILED = "An error occurred while filtering movies by year. Please try again."
YEAR_CLEAR_FAILED = "An error occurred while clearing the year filter. Please try again."
GENRE_FILTER_FAILED = "An error occurred while updating the genre filter. Please try again."
PROVIDER_FILTER_FAILED = (
    "An error occurred while updating the watch provider filter. Please try again."
)
LOAD_MORE_FAILED = "An error occurred while fetching more movies. Please try again."
INITIAL_LOAD_FAILED = "An error occurred while loading movies. Please try again."


class BrowseStatus(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class Results:
    movies: tuple[Movie, ...] = ()
    total_results: int = 0
    # Filters the movies were loaded for; None until the first successful fetch
    filters: Optional[FilterState] = None
    # Last page number merged into movies
    page: int = 0

    @classmethod
    def first_page(cls, page: MoviePage, filters: FilterState) -> Results:
        return cls(tuple(page.movies), page.total_results, filters, 1)

    def appended(self, page: MoviePage) -> Results:
        return replace(
            self,
            movies=self.movies + tuple(page.movies),
            total_results=page.total_results,
            page=self.page + 1,
        )

    @property
    def has_more(self) -> bool:
        return len(self.movies) < self.total_results and self.page < MAX_PAGE


class BrowseController:
    """Drives the movie grid: filter changes, pagination and the detail overlay.

    Filter changes reload page 1. The boundary signal appends the next page,
    ignored while a fetch is in flight. Each fetch carries a generation
    number and only the latest one may touch the results.
    """

    def __init__(
        self,
        client: TMDBClient,
        *,
        store: Optional[FilterStore] = None,
        aggregator: Optional[ResultAggregator] = None,
        queries: Optional[QueryBuilder] = None,
    ):
        self.client = client
        self.store = store or FilterStore()
        self.aggregator = aggregator or ResultAggregator(client)
        self.queries = queries or QueryBuilder(region=getattr(client, "region", None))

        self.status = BrowseStatus.IDLE
        self.results = Results()
        self.page = 1
        self.error: Optional[str] = None
        self.genres: list[Genre] = []
        self.watch_providers: list[str] = []
        self.selected_movie: Optional[Movie] = None

        self._generation = 0
        # Filters sent by the latest reset fetch, settled or not
        self._requested: Optional[FilterState] = None
        self._near_bottom = False

    @property
    def filters(self) -> FilterState:
        return self.store.state

    @property
    def movies(self) -> tuple[Movie, ...]:
        return self.results.movies

    @property
    def total_results(self) -> int:
        return self.results.total_results

    # --- generation bookkeeping ---

    def _begin(self) -> int:
        self._generation += 1
        self.status = BrowseStatus.FETCHING
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    def _settle(self, generation: int, results: Results) -> bool:
        if self._is_stale(generation):
            logger.debug("Discarding stale response (generation %s)", generation)
            return False
        self.results = results
        self.error = None
        self.status = BrowseStatus.READY
        return True

    def _fail(self, generation: int, message: str, exc: TMDBError) -> None:
        if self._is_stale(generation):
            logger.debug("Discarding stale failure (generation %s): %s", generation, exc)
            return
        logger.warning("%s (%s)", message, exc)
        self.error = message
        self.status = BrowseStatus.ERROR

    # --- reset path ---

    async def _reload(self, failure_message: str) -> bool:
        self.page = 1
        generation = self._begin()
        filters = self.store.state
        self._requested = filters
        request = self.queries.build(filters, 1)
        try:
            page = await self.aggregator.load_page(request)
        except TMDBError as e:
            self._fail(generation, failure_message, e)
            return False
        return self._settle(generation, Results.first_page(page, filters))

    async def preload(self) -> bool:
        """Load the genre and provider lists, then the first discover page."""
        generation = self._begin()
        genres, catalog = await asyncio.gather(self._load_genres(), self._load_catalog())
        self.genres = genres
        self.watch_providers = [p.provider_name for p in catalog]
        self.queries.set_provider_catalog({p.provider_name: p.provider_id for p in catalog})

        if self._is_stale(generation):
            # A filter change already started its own fetch
            return False
        return await self._reload(INITIAL_LOAD_FAILED)

    async def _load_genres(self) -> list[Genre]:
        try:
            return await self.client.fetch_genres()
        except TMDBError as e:
            logger.warning("Could not load genres: %s", e)
            return []

    async def _load_catalog(self) -> list[ProviderOption]:
        try:
            return await self.client.fetch_provider_catalog()
        except TMDBError as e:
            logger.warning("Could not load watch providers: %s", e)
            return []

    def set_search_term(self, term: str) -> FilterState:
        """Live typing: remembered, but nothing is fetched until submit."""
        return self.store.set_search_term(term)

    async def submit_search(self, term: Optional[str] = None) -> bool:
        if term is not None:
            self.store.set_search_term(term)
        return await self._reload(SEARCH_FAILED)

    async def toggle_year_filter(self, on: bool) -> bool:
        self.store.toggle_year_filter(on)
        return await self._reload(YEAR_FILTER_FAILED if on else YEAR_CLEAR_FAILED)

    async def toggle_genre(self, genre_id: int) -> bool:
        self.store.toggle_genre(genre_id)
        return await self._reload(GENRE_FILTER_FAILED)

    async def toggle_provider(self, name: str) -> bool:
        self.store.toggle_provider(name)
        return await self._reload(PROVIDER_FILTER_FAILED)

    # --- scroll path ---

    def can_load_more(self) -> bool:
        return (
            self.status is not BrowseStatus.FETCHING
            and bool(self.results.movies)
            and self.results.filters == self._requested
            and self.results.has_more
        )

    async def boundary_crossed(
        self, near_bottom: bool = True, max_pages: Optional[int] = None
    ) -> int:
        """Handle the end-of-list signal; returns how many pages were appended.

        While the signal keeps holding after a page lands, the next one is
        requested. A signal arriving during a fetch is dropped.
        """
        self._near_bottom = near_bottom
        loaded = 0
        while self._near_bottom and self.can_load_more():
            if max_pages is not None and loaded >= max_pages:
                break
            generation = self._begin()
            request = self.queries.build(self.results.filters, self.results.page + 1)
            try:
                page = await self.aggregator.load_page(request)
            except TMDBError as e:
                self._fail(generation, LOAD_MORE_FAILED, e)
                break
            if not self._settle(generation, self.results.appended(page)):
                break
            self.page = self.results.page
            loaded += 1
            if not page.movies:
                break
        return loaded

    # --- detail overlay ---

    def select_movie(self, movie_id: int) -> Optional[Movie]:
        movie = next((m for m in self.results.movies if m.id == movie_id), None)
        if movie is not None:
            self.selected_movie = movie
        return movie

    def close_detail(self) -> None:
        self.selected_movie = None

    def genre_names(self, movie: Movie) -> str:
        names = {g.id: g.name for g in self.genres}
        return ", ".join(names[g] for g in movie.genre_ids if names.get(g))
