import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.dependencies import get_controller, get_registry
from core.pagination import BrowseController
from models.movie import Movie
from services.sessions import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["browse"])


class SearchTermBody(BaseModel):
    term: str


class SubmitSearchBody(BaseModel):
    term: Optional[str] = None


class YearFilterBody(BaseModel):
    on: bool


class ScrollBody(BaseModel):
    near_bottom: bool = True
    # The browser re-sends the signal if the sentinel is still visible
    max_pages: int = Field(default=1, ge=1)


class ProviderView(BaseModel):
    provider_id: int
    provider_name: str
    logo_path: Optional[str] = None
    display_priority: Optional[int] = None


class MovieView(BaseModel):
    id: int
    title: str
    year: Optional[str] = None
    release_date: Optional[str] = None
    poster_url: Optional[str] = None
    overview: str = ""
    genre_ids: list[int] = []
    runtime: Optional[int] = None
    watch_providers: list[ProviderView] = []


class SelectedMovieView(MovieView):
    genre_names: str = ""


class GenreView(BaseModel):
    id: int
    name: str


class FiltersView(BaseModel):
    search_term: str
    year_range: Optional[tuple[int, int]] = None
    genre_ids: list[int]
    provider_names: list[str]


class SessionView(BaseModel):
    session_id: str
    status: str
    error: Optional[str] = None
    page: int
    total_results: int
    showing: str
    movies: list[MovieView]
    genres: list[GenreView]
    watch_providers: list[str]
    filters: FiltersView
    selected_movie: Optional[SelectedMovieView] = None


def _movie_fields(movie: Movie) -> dict:
    return {
        "id": movie.id,
        "title": movie.title,
        "year": movie.year,
        "release_date": movie.release_date,
        "poster_url": movie.poster_url,
        "overview": movie.overview,
        "genre_ids": list(movie.genre_ids),
        "runtime": movie.runtime,
        "watch_providers": [
            ProviderView(
                provider_id=p.provider_id,
                provider_name=p.provider_name,
                logo_path=p.logo_path,
                display_priority=p.display_priority,
            )
            for p in movie.watch_providers
        ],
    }


def _render(session_id: str, controller: BrowseController) -> SessionView:
    filters = controller.filters
    selected = controller.selected_movie
    movies = controller.movies
    return SessionView(
        session_id=session_id,
        status=controller.status.value,
        error=controller.error,
        page=controller.page,
        total_results=controller.total_results,
        showing=(
            f"Showing {len(movies)} of {controller.total_results} results"
            if movies
            else "No movies found."
        ),
        movies=[MovieView(**_movie_fields(m)) for m in movies],
        genres=[GenreView(id=g.id, name=g.name) for g in controller.genres],
        watch_providers=list(controller.watch_providers),
        filters=FiltersView(
            search_term=filters.search_term,
            year_range=(
                (filters.year_range.start, filters.year_range.end)
                if filters.year_range
                else None
            ),
            genre_ids=list(filters.genre_ids),
            provider_names=list(filters.provider_names),
        ),
        selected_movie=(
            SelectedMovieView(**_movie_fields(selected), genre_names=controller.genre_names(selected))
            if selected
            else None
        ),
    )


@router.post("", response_model=SessionView)
async def create_session(registry: SessionRegistry = Depends(get_registry)):
    session_id, controller = registry.create()
    await controller.preload()
    return _render(session_id, controller)


@router.get("/{session_id}", response_model=SessionView)
async def get_session(session_id: str, controller: BrowseController = Depends(get_controller)):
    return _render(session_id, controller)


@router.delete("/{session_id}")
async def close_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    if not registry.drop(session_id):
        raise HTTPException(status_code=404, detail="Unknown session")
    logger.info("Closed session %s", session_id)
    return {"success": True}


@router.put("/{session_id}/search-term", response_model=SessionView)
async def type_search_term(
    session_id: str,
    body: SearchTermBody,
    controller: BrowseController = Depends(get_controller),
):
    controller.set_search_term(body.term)
    return _render(session_id, controller)


@router.post("/{session_id}/search", response_model=SessionView)
async def submit_search(
    session_id: str,
    body: SubmitSearchBody,
    controller: BrowseController = Depends(get_controller),
):
    await controller.submit_search(body.term)
    return _render(session_id, controller)


@router.post("/{session_id}/year-filter", response_model=SessionView)
async def toggle_year_filter(
    session_id: str,
    body: YearFilterBody,
    controller: BrowseController = Depends(get_controller),
):
    await controller.toggle_year_filter(body.on)
    return _render(session_id, controller)


@router.post("/{session_id}/genres/{genre_id}", response_model=SessionView)
async def toggle_genre(
    session_id: str,
    genre_id: int,
    controller: BrowseController = Depends(get_controller),
):
    await controller.toggle_genre(genre_id)
    return _render(session_id, controller)


@router.post("/{session_id}/providers/{provider_name}", response_model=SessionView)
async def toggle_provider(
    session_id: str,
    provider_name: str,
    controller: BrowseController = Depends(get_controller),
):
    await controller.toggle_provider(provider_name)
    return _render(session_id, controller)


@router.post("/{session_id}/scroll", response_model=SessionView)
async def scroll(
    session_id: str,
    body: ScrollBody,
    controller: BrowseController = Depends(get_controller),
):
    await controller.boundary_crossed(body.near_bottom, max_pages=body.max_pages)
    return _render(session_id, controller)


@router.post("/{session_id}/selection/{movie_id}", response_model=SessionView)
async def select_movie(
    session_id: str,
    movie_id: int,
    controller: BrowseController = Depends(get_controller),
):
    if controller.select_movie(movie_id) is None:
        raise HTTPException(status_code=404, detail="Movie not in the loaded results")
    return _render(session_id, controller)


@router.delete("/{session_id}/selection", response_model=SessionView)
async def close_detail(session_id: str, controller: BrowseController = Depends(get_controller)):
    controller.close_detail()
    return _render(session_id, controller)
