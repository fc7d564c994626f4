import logging
from typing import Any, Optional

import httpx

from config import settings
from constants.tmdb import (
    DETAIL_APPEND,
    GENRE_LIST_PATH,
    MOVIE_DETAIL_PATH,
    PROVIDER_LIST_PATH,
)
from core.errors import NetworkError, ParseError, UpstreamError
from core.query_builder import PageRequest
from models.movie import Genre, Movie, MovieDetail, MoviePage, ProviderOption

logger = logging.getLogger(__name__)


class TMDBClient:
    """Async client for the handful of TMDB endpoints the browser needs.

    Every call raises a ``TMDBError`` subclass on failure; callers decide
    how to surface it.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        region: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or settings.TMDB_BASE_URL).rstrip("/")
        self.region = region or settings.TMDB_REGION
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict:
        query: dict[str, Any] = {"api_key": self.api_key}
        if params:
            query.update(params)

        try:
            response = await self.client.get(f"{self.base_url}{path}", params=query)
        except httpx.RequestError as e:
            logger.warning("TMDB %s unreachable: %s", path, e)
            raise NetworkError(str(e) or e.__class__.__name__) from e

        data = self._decode(response)
        if not response.is_success:
            message = data.get("status_message") or response.reason_phrase
            logger.warning("TMDB %s answered %s: %s", path, response.status_code, message)
            raise UpstreamError(response.status_code, message)
        return data

    @staticmethod
    def _decode(response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    async def fetch_page(self, request: PageRequest) -> MoviePage:
        data = await self._get(request.path, request.params)
        logger.info("Fetched %s page %s", request.path, request.page)

        results = data.get("results")
        movies = []
        for entry in results if isinstance(results, list) else []:
            try:
                movies.append(Movie.from_api(entry))
            except ParseError as e:
                logger.warning("Skipping result: %s", e)

        total = data.get("total_results")
        return MoviePage(
            movies=movies,
            total_results=total if isinstance(total, int) and not isinstance(total, bool) else 0,
        )

    async def fetch_genres(self) -> list[Genre]:
        data = await self._get(GENRE_LIST_PATH)
        genres = []
        for entry in data.get("genres") or []:
            try:
                genres.append(Genre.from_api(entry))
            except ParseError as e:
                logger.warning("Skipping genre: %s", e)
        return genres

    async def fetch_provider_catalog(self) -> list[ProviderOption]:
        data = await self._get(PROVIDER_LIST_PATH)
        catalog = []
        for entry in data.get("results") or []:
            try:
                catalog.append(ProviderOption.from_api(entry))
            except ParseError as e:
                logger.warning("Skipping provider: %s", e)
        return catalog

    async def fetch_watch_providers(self) -> list[str]:
        return [p.provider_name for p in await self.fetch_provider_catalog()]

    async def fetch_detail(self, movie_id: int) -> MovieDetail:
        data = await self._get(
            MOVIE_DETAIL_PATH.format(movie_id=movie_id),
            {"append_to_response": DETAIL_APPEND},
        )
        return MovieDetail.from_api(data, self.region)
