import asyncio
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from swipe_core.config import TMDB_BASE_URL, TMDB_IMAGE_BASE_URL, TMDB_IMAGE_SIZES, TMDB_TIMEOUT_S
from swipe_core.errors import CatalogError, ConfigurationError
from swipe_core.settings import Settings

from .movie_cache import MovieCache
from .schemas import Genre, MovieDetails, MovieFilters, MovieResponse

log = logging.getLogger(__name__)


class TMDBClient:
    """
    Thin async client over the TMDB v3 REST API. Upstream failures are logged
    and raised as CatalogError; there is no retry.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = TMDB_BASE_URL,
        image_base_url: str = TMDB_IMAGE_BASE_URL,
        timeout: float = TMDB_TIMEOUT_S,
        max_connections: int = 15,
        cache: MovieCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise ConfigurationError(
                "TMDB API key is required. Please set TMDB_API_KEY in your environment variables."
            )
        self.image_base_url = image_base_url.rstrip("/")
        limits = httpx.Limits(
            max_connections=max_connections, max_keepalive_connections=max_connections
        )
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            params={"api_key": api_key},
            timeout=httpx.Timeout(timeout),
            limits=limits,
            headers={"Accept": "application/json"},
            transport=transport,
        )
        self.semaphore = asyncio.Semaphore(max_connections)
        self.cache = cache if cache is not None else MovieCache()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "TMDBClient":
        return cls(
            settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            image_base_url=settings.tmdb_image_base_url,
            timeout=settings.tmdb_timeout_s,
            **kwargs,
        )

    # ---- images ----

    def image_url(self, path: Optional[str], size: str = "w500") -> Optional[str]:
        if not path:
            return None
        if size not in TMDB_IMAGE_SIZES:
            raise ValueError(f"unsupported image size: {size}")
        return f"{self.image_base_url}/{size}{path}"

    def optimized_image_url(self, path: Optional[str], viewport_width: int) -> Optional[str]:
        """Pick the poster size for a viewport width."""
        size = "w500"
        if viewport_width < 640:
            size = "w300"
        elif viewport_width > 1280:
            size = "w780"
        return self.image_url(path, size)

    # ---- transport ----

    async def get(self, path: str, params: dict[str, Any] | None = None, *, what: str) -> Any:
        async with self.semaphore:
            try:
                response = await self.client.get(path, params=params)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                log.error("Error %s: HTTP %s", what, e.response.status_code)
                raise CatalogError(
                    f"TMDB request failed while {what}",
                    upstream_status=e.response.status_code,
                ) from e
            except httpx.RequestError as e:
                log.error("Error %s: %s", what, e)
                raise CatalogError(f"TMDB unreachable while {what}: {e}") from e
            except ValueError as e:
                log.error("Error %s: invalid JSON body", what)
                raise CatalogError(f"TMDB returned invalid JSON while {what}") from e

    def _parse(self, model, data: Any, what: str):
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            log.error("Error %s: unexpected payload (%d errors)", what, e.error_count())
            raise CatalogError(f"unexpected TMDB payload while {what}") from e

    # ---- endpoints ----

    async def discover_movies(
        self, filters: MovieFilters | None = None, page: int = 1
    ) -> MovieResponse:
        what = "discovering movies"
        params = (filters or MovieFilters()).to_params(page)
        data = await self.get("/discover/movie", params, what=what)
        return self._parse(MovieResponse, data, what)

    async def get_popular_movies(self, page: int = 1) -> MovieResponse:
        what = "fetching popular movies"
        data = await self.get("/movie/popular", {"page": page}, what=what)
        return self._parse(MovieResponse, data, what)

    async def get_movie_details(
        self, movie_id: int, include_credits: bool = False
    ) -> MovieDetails:
        cached = self.cache.get(movie_id)
        if cached is not None and (cached.credits is not None or not include_credits):
            return cached

        what = f"fetching movie details for ID {movie_id}"
        params = {"append_to_response": "credits"} if include_credits else None
        data = await self.get(f"/movie/{movie_id}", params, what=what)
        details = self._parse(MovieDetails, data, what)
        self.cache.put(movie_id, details)
        return details

    async def get_genres(self) -> list[Genre]:
        what = "fetching genres"
        data = await self.get("/genre/movie/list", what=what)
        return [self._parse(Genre, g, what) for g in (data or {}).get("genres", [])]

    async def get_recommendations(self, movie_id: int, page: int = 1) -> MovieResponse:
        what = f"fetching recommendations for movie {movie_id}"
        data = await self.get(f"/movie/{movie_id}/recommendations", {"page": page}, what=what)
        return self._parse(MovieResponse, data, what)

    async def search_movies(self, query: str, page: int = 1) -> MovieResponse:
        what = "searching movies"
        data = await self.get("/search/movie", {"query": query, "page": page}, what=what)
        return self._parse(MovieResponse, data, what)

    async def aclose(self):
        await self.client.aclose()
