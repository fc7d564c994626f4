from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from config import settings
from constants.tmdb import FLATRATE, WATCH_PROVIDERS_KEY
from core.errors import ParseError


def poster_url(poster_path: str | None) -> str | None:
    if not poster_path:
        return None
    return f"{settings.TMDB_IMAGE_BASE.rstrip('/')}{poster_path}"


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


@dataclass(frozen=True)
class Genre:
    id: int
    name: str

    @classmethod
    def from_api(cls, data: Any) -> Genre:
        if not isinstance(data, dict) or _int_or_none(data.get("id")) is None:
            raise ParseError(f"Malformed genre entry: {data!r}")
        return cls(id=data["id"], name=str(data.get("name") or ""))


@dataclass(frozen=True)
class ProviderOption:
    """One entry of the provider catalog offered as a filter."""

    provider_id: int
    provider_name: str

    @classmethod
    def from_api(cls, data: Any) -> ProviderOption:
        if not isinstance(data, dict) or not data.get("provider_name"):
            raise ParseError(f"Malformed provider entry: {data!r}")
        provider_id = _int_or_none(data.get("provider_id"))
        if provider_id is None:
            raise ParseError(f"Provider without id: {data!r}")
        return cls(provider_id=provider_id, provider_name=data["provider_name"])


@dataclass(frozen=True)
class WatchProvider:
    provider_id: int
    provider_name: str
    logo_path: str | None = None
    display_priority: int | None = None

    @classmethod
    def from_api(cls, data: Any) -> WatchProvider:
        option = ProviderOption.from_api(data)
        return cls(
            provider_id=option.provider_id,
            provider_name=option.provider_name,
            logo_path=data.get("logo_path"),
            display_priority=_int_or_none(data.get("display_priority")),
        )


@dataclass(frozen=True)
class MovieDetail:
    runtime: int | None = None
    watch_providers: tuple[WatchProvider, ...] = ()

    @classmethod
    def from_api(cls, data: Any, region: str) -> MovieDetail:
        if not isinstance(data, dict):
            return cls()

        block = data.get(WATCH_PROVIDERS_KEY)
        offers = []
        if isinstance(block, dict):
            by_region = block.get("results")
            if isinstance(by_region, dict):
                regional = by_region.get(region)
                if isinstance(regional, dict):
                    offers = regional.get(FLATRATE) or []

        providers = []
        for offer in offers if isinstance(offers, list) else []:
            try:
                providers.append(WatchProvider.from_api(offer))
            except ParseError:
                continue

        return cls(runtime=_int_or_none(data.get("runtime")), watch_providers=tuple(providers))


@dataclass(frozen=True)
class Movie:
    id: int
    title: str
    release_date: str | None = None
    poster_path: str | None = None
    overview: str = ""
    genre_ids: tuple[int, ...] = ()
    # Filled in by enrichment
    runtime: int | None = None
    watch_providers: tuple[WatchProvider, ...] = ()

    @classmethod
    def from_api(cls, data: Any) -> Movie:
        if not isinstance(data, dict):
            raise ParseError(f"Malformed movie entry: {data!r}")
        movie_id = _int_or_none(data.get("id"))
        if movie_id is None:
            raise ParseError(f"Movie without id: {data!r}")

        genre_ids = data.get("genre_ids") or []
        return cls(
            id=movie_id,
            title=str(data.get("title") or ""),
            release_date=data.get("release_date") or None,
            poster_path=data.get("poster_path") or None,
            overview=str(data.get("overview") or ""),
            genre_ids=tuple(g for g in genre_ids if _int_or_none(g) is not None),
        )

    @property
    def year(self) -> str | None:
        return self.release_date[:4] if self.release_date else None

    @property
    def poster_url(self) -> str | None:
        return poster_url(self.poster_path)

    def enriched(self, detail: MovieDetail) -> Movie:
        return replace(
            self,
            runtime=detail.runtime,
            watch_providers=detail.watch_providers,
        )


@dataclass
class MoviePage:
    movies: list[Movie] = field(default_factory=list)
    total_results: int = 0
