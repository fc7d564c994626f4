import os

# Set env vars BEFORE any imports from the project happen
os.environ.setdefault("TMDB_API_KEY", "test-tmdb")
os.environ.setdefault("TMDB_REGION", "US")
os.environ.setdefault("YEAR_FILTER_START", "2023")
os.environ.setdefault("YEAR_FILTER_END", "2024")

import httpx
import pytest

from services.tmdb import TMDBClient


def movie_payload(movie_id: int, title: str | None = None, **extra) -> dict:
    data = {
        "id": movie_id,
        "title": title or f"Movie {movie_id}",
        "release_date": "2023-10-20",
        "poster_path": f"/poster{movie_id}.jpg",
        "overview": f"Overview {movie_id}",
        "genre_ids": [28],
    }
    data.update(extra)
    return data


def detail_payload(runtime: int, *providers: str, region: str = "US") -> dict:
    flatrate = [
        {
            "provider_id": 100 + i,
            "provider_name": name,
            "logo_path": f"/logo{i}.png",
            "display_priority": i,
        }
        for i, name in enumerate(providers)
    ]
    return {
        "runtime": runtime,
        "watch/providers": {
            "results": {
                region: {
                    "flatrate": flatrate,
                    "rent": [{"provider_id": 2, "provider_name": "Apple TV"}],
                }
            }
        },
    }


class FakeTMDB:
    """Canned TMDB served through httpx.MockTransport; records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.lists: dict[tuple[str, int], dict] = {}
        self.details: dict[int, dict] = {}
        self.failing_details: set[int] = set()
        self.errors: dict[str, tuple[int, dict]] = {}
        self.genres = [{"id": 28, "name": "Action"}, {"id": 12, "name": "Adventure"}]
        self.providers = [
            {"provider_id": 8, "provider_name": "Netflix"},
            {"provider_id": 337, "provider_name": "Disney Plus"},
        ]

    def add_page(self, path: str, page: int, movies: list[dict], total: int) -> None:
        self.lists[(path, page)] = {"page": page, "results": movies, "total_results": total}

    def list_requests(self) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.url.path.endswith(("/search/movie", "/discover/movie"))
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/3")

        if path in self.errors:
            status, body = self.errors[path]
            return httpx.Response(status, json=body)
        if path == "/genre/movie/list":
            return httpx.Response(200, json={"genres": self.genres})
        if path == "/watch/providers/movie":
            return httpx.Response(200, json={"results": self.providers})
        if path.startswith("/movie/"):
            movie_id = int(path.split("/")[2])
            if movie_id in self.failing_details:
                return httpx.Response(500, json={"status_message": "Internal error."})
            return httpx.Response(200, json=self.details.get(movie_id, {}))

        page = int(request.url.params.get("page", 1))
        return httpx.Response(
            200, json=self.lists.get((path, page), {"results": [], "total_results": 0})
        )


@pytest.fixture
def fake_tmdb():
    return FakeTMDB()


@pytest.fixture
def tmdb_client(fake_tmdb):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_tmdb.handler))
    return TMDBClient("test-tmdb", client=http_client)
