TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
TMDB_TIMEOUT_S = 10.0
TMDB_IMAGE_SIZES = ("w300", "w500", "w780", "original")

STORAGE_NAMESPACE = "swipe:prefs:"
PROFILE_KEY = "preferences"
INTERACTIONS_KEY = "interactions"
MAX_INTERACTIONS = 100  # interaction log capacity, newest first
MOVIE_CACHE_SIZE = 50

# Default profile
DEFAULT_MINIMUM_RATING = 6.0
DEFAULT_LANGUAGES = ("en",)
DEFAULT_YEAR_MIN = 2000

# Preference update rule
RATING_FLOOR_MIN_LIKES = 5  # floor is recomputed once likes exceed this
RATING_FLOOR_LOWEST = 5.0
RATING_FLOOR_MARGIN = 1.0

# Scoring coefficients
GENRE_BASELINE = 0.5
GENRE_FAVORITE_BOOST = 0.2
GENRE_DISLIKE_PENALTY = 0.3
RATING_SCALE = 10.0
BELOW_FLOOR_RATING_FACTOR = 0.5
RECENCY_HORIZON_YEARS = 20.0
POPULARITY_SATURATION = 100.0
OTHER_LANGUAGE_SCORE = 0.3
