class TMDBError(Exception):
    """Base exception for failures talking to TMDB."""


class NetworkError(TMDBError):
    """Raised when the request never got a response (DNS, connect, timeout...)."""


class UpstreamError(TMDBError):
    """Raised when TMDB answers with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"API request failed ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


class ParseError(TMDBError):
    """Raised when a payload entry does not have the expected shape."""
