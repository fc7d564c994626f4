from __future__ import annotations

from dataclasses import dataclass, replace

from config import settings


@dataclass(frozen=True)
class YearRange:
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Year range start {self.start} is after end {self.end}")

    @property
    def lower_bound(self) -> str:
        return f"{self.start}-01-01"

    @property
    def upper_bound(self) -> str:
        return f"{self.end}-12-31"


def default_year_range() -> YearRange:
    return YearRange(settings.YEAR_FILTER_START, settings.YEAR_FILTER_END)


@dataclass(frozen=True)
class FilterState:
    """What the user asked for. Every change produces a new instance."""

    search_term: str = ""
    year_range: YearRange | None = None
    genre_ids: tuple[int, ...] = ()
    provider_names: tuple[str, ...] = ()

    @property
    def query(self) -> str:
        return self.search_term.strip()

    @property
    def is_text_search(self) -> bool:
        return bool(self.query)

    def with_search_term(self, term: str) -> FilterState:
        return replace(self, search_term=term)

    def with_year_range(self, year_range: YearRange | None) -> FilterState:
        return replace(self, year_range=year_range)

    def toggling_genre(self, genre_id: int) -> FilterState:
        if genre_id in self.genre_ids:
            return replace(self, genre_ids=tuple(g for g in self.genre_ids if g != genre_id))
        return replace(self, genre_ids=self.genre_ids + (genre_id,))

    def toggling_provider(self, name: str) -> FilterState:
        if name in self.provider_names:
            return replace(
                self, provider_names=tuple(p for p in self.provider_names if p != name)
            )
        return replace(self, provider_names=self.provider_names + (name,))


class FilterStore:
    def __init__(self, state: FilterState | None = None, year_range: YearRange | None = None):
        self.state = state or FilterState()
        self.default_year_range = year_range or default_year_range()

    def set_search_term(self, term: str) -> FilterState:
        self.state = self.state.with_search_term(term)
        return self.state

    def toggle_year_filter(self, on: bool) -> FilterState:
        self.state = self.state.with_year_range(self.default_year_range if on else None)
        return self.state

    def toggle_genre(self, genre_id: int) -> FilterState:
        self.state = self.state.toggling_genre(genre_id)
        return self.state

    def toggle_provider(self, name: str) -> FilterState:
        self.state = self.state.toggling_provider(name)
        return self.state
