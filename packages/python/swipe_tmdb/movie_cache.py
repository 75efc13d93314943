from __future__ import annotations

from swipe_core.config import MOVIE_CACHE_SIZE

from .schemas import MovieDetails


class MovieCache:
    """Bounded movie-details cache; evicts the oldest insertion when full (FIFO)."""

    def __init__(self, max_size: int = MOVIE_CACHE_SIZE):
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.max_size = max_size
        self._items: dict[int, MovieDetails] = {}

    def put(self, movie_id: int, details: MovieDetails) -> None:
        if movie_id not in self._items and len(self._items) >= self.max_size:
            oldest = next(iter(self._items))
            del self._items[oldest]
        self._items[movie_id] = details

    def get(self, movie_id: int) -> MovieDetails | None:
        return self._items.get(movie_id)

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, movie_id: object) -> bool:
        return movie_id in self._items

    def __len__(self) -> int:
        return len(self._items)
