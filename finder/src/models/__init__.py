from models.movie import Genre, Movie, MovieDetail, MoviePage, ProviderOption, WatchProvider

__all__ = ["Genre", "Movie", "MovieDetail", "MoviePage", "ProviderOption", "WatchProvider"]
