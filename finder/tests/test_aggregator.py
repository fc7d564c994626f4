import asyncio
from unittest.mock import AsyncMock

from conftest import detail_payload, movie_payload
from core.errors import NetworkError
from core.query_builder import PageRequest
from models.movie import Movie, MovieDetail
from services.aggregator import ResultAggregator


def _movies(*ids: int) -> list[Movie]:
    return [Movie.from_api(movie_payload(i)) for i in ids]


async def test_enrich_merges_runtime_and_providers(tmdb_client, fake_tmdb):
    fake_tmdb.details[1] = detail_payload(120, "Netflix")
    fake_tmdb.details[2] = detail_payload(95)

    enriched = await ResultAggregator(tmdb_client).enrich(_movies(1, 2))

    assert [m.runtime for m in enriched] == [120, 95]
    assert [p.provider_name for p in enriched[0].watch_providers] == ["Netflix"]
    assert enriched[1].watch_providers == ()
    assert enriched[0].title == "Movie 1"


async def test_one_failed_lookup_is_isolated(tmdb_client, fake_tmdb):
    fake_tmdb.details[1] = detail_payload(120, "Netflix")
    fake_tmdb.details[3] = detail_payload(88, "Hulu")
    fake_tmdb.failing_details.add(2)

    enriched = await ResultAggregator(tmdb_client).enrich(_movies(1, 2, 3))

    assert len(enriched) == 3
    assert [m.id for m in enriched] == [1, 2, 3]
    assert enriched[1].runtime is None
    assert enriched[1].watch_providers == ()
    assert enriched[0].runtime == 120
    assert enriched[2].runtime == 88
    assert [p.provider_name for p in enriched[2].watch_providers] == ["Hulu"]


async def test_enrich_empty_page_makes_no_calls():
    client = AsyncMock()
    assert await ResultAggregator(client).enrich([]) == []
    client.fetch_detail.assert_not_awaited()


async def test_lookups_run_concurrently():
    started = []
    release = asyncio.Event()

    async def fetch_detail(movie_id):
        started.append(movie_id)
        await release.wait()
        return MovieDetail(runtime=movie_id)

    client = AsyncMock()
    client.fetch_detail.side_effect = fetch_detail

    task = asyncio.create_task(ResultAggregator(client).enrich(_movies(1, 2, 3)))
    while len(started) < 3:
        await asyncio.sleep(0)
    assert sorted(started) == [1, 2, 3]
    release.set()

    enriched = await task
    assert [m.runtime for m in enriched] == [1, 2, 3]


async def test_unexpected_exception_degrades_one_movie():
    async def fetch_detail(movie_id):
        if movie_id == 2:
            raise RuntimeError("bug")
        if movie_id == 3:
            raise NetworkError("timeout")
        return MovieDetail(runtime=100)

    client = AsyncMock()
    client.fetch_detail.side_effect = fetch_detail

    enriched = await ResultAggregator(client).enrich(_movies(1, 2, 3))

    assert [m.runtime for m in enriched] == [100, None, None]


async def test_load_page_enriches_and_keeps_total(tmdb_client, fake_tmdb):
    fake_tmdb.add_page("/discover/movie", 1, [movie_payload(7)], 40)
    fake_tmdb.details[7] = detail_payload(132, "Netflix")

    page = await ResultAggregator(tmdb_client).load_page(
        PageRequest("/discover/movie", {"sort_by": "release_date.desc", "page": 1})
    )

    assert page.total_results == 40
    assert page.movies[0].runtime == 132
