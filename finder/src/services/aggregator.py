import asyncio
import logging
from typing import Sequence

from core.errors import TMDBError
from core.query_builder import PageRequest
from models.movie import Movie, MovieDetail, MoviePage
from services.tmdb import TMDBClient

logger = logging.getLogger(__name__)


class ResultAggregator:
    def __init__(self, client: TMDBClient):
        self.client = client

    async def load_page(self, request: PageRequest) -> MoviePage:
        """Fetch one list page and enrich every movie on it."""
        page = await self.client.fetch_page(request)
        return MoviePage(movies=await self.enrich(page.movies), total_results=page.total_results)

    async def enrich(self, movies: Sequence[Movie]) -> list[Movie]:
        """Attach runtime and flatrate providers to each movie.

        Lookups run concurrently. A failed lookup only affects its own movie,
        which comes back with no runtime and no providers.
        """
        if not movies:
            return []

        results = await asyncio.gather(
            *(self._enrich_one(movie) for movie in movies),
            return_exceptions=True,
        )

        enriched = []
        for movie, result in zip(movies, results):
            if isinstance(result, Movie):
                enriched.append(result)
            else:
                logger.error("Enrichment crashed for movie %s: %r", movie.id, result)
                enriched.append(movie.enriched(MovieDetail()))
        return enriched

    async def _enrich_one(self, movie: Movie) -> Movie:
        try:
            detail = await self.client.fetch_detail(movie.id)
        except TMDBError as e:
            logger.warning("Detail lookup failed for movie %s: %s", movie.id, e)
            return movie.enriched(MovieDetail())
        return movie.enriched(detail)
