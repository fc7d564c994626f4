import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from api.browse import router as browse_router
from api.health import router as health_router
from config import settings
from services.sessions import SessionRegistry
from services.tmdb import TMDBClient

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A missing key is not fatal: every TMDB call will fail and show an error
    if not settings.TMDB_API_KEY:
        logger.warning("TMDB_API_KEY is not set, all movie requests will fail")

    http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)
    tmdb = TMDBClient(settings.TMDB_API_KEY, client=http_client)
    app.state.registry = SessionRegistry(tmdb)
    logger.info(
        "TMDB ready: base=%s region=%s", tmdb.base_url, tmdb.region
    )

    yield
    app.state.registry.reset()
    await http_client.aclose()


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        return response


app.add_middleware(SecurityHeadersMiddleware)

app.include_router(health_router)
app.include_router(browse_router)
