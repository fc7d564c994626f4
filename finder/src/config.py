from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # TMDB settings: an empty key is tolerated, every call then fails upstream
    TMDB_API_KEY: str = ""
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE: str = "https://image.tmdb.org/t/p/w500"
    TMDB_REGION: str = "US"  # only flatrate offers for this region are kept
    HTTP_TIMEOUT: float = 10.0

    # Range applied by the year filter toggle
    YEAR_FILTER_START: int = 2023
    YEAR_FILTER_END: int = 2024

    APP_NAME: str = "Movie Finder"
    MAX_SESSIONS: int = 500
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
