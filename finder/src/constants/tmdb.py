SEARCH_PATH = "/search/movie"
DISCOVER_PATH = "/discover/movie"
GENRE_LIST_PATH = "/genre/movie/list"
PROVIDER_LIST_PATH = "/watch/providers/movie"
MOVIE_DETAIL_PATH = "/movie/{movie_id}"

DISCOVER_SORT = "release_date.desc"

# Detail lookups append the provider block, which comes back under the same key
DETAIL_APPEND = "watch/providers"
WATCH_PROVIDERS_KEY = "watch/providers"
FLATRATE = "flatrate"

# TMDB rejects list requests past this page
MAX_PAGE = 500
