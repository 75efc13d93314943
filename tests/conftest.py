from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from swipe_core.types import CatalogMovie
from swipe_user.preferences.kv_backends import InMemoryKeyValue
from swipe_user.preferences.preference_store import PreferenceStore

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class RecordingKeyValue(InMemoryKeyValue):
    """In-memory backend that also remembers every set() call."""

    def __init__(self):
        super().__init__()
        self.sets: List[Dict[str, Any]] = []

    def set(self, name, value, ex=None):
        self.sets.append({"name": name, "ex": ex})
        return super().set(name, value, ex=ex)


class FailingKeyValue:
    """Every call fails the way an unreachable Redis does."""

    def get(self, name):
        raise RedisConnectionError("connection refused")

    def set(self, name, value, ex=None):
        raise RedisConnectionError("connection refused")

    def delete(self, *names):
        raise RedisConnectionError("connection refused")


def make_movie(
    movie_id: int = 1,
    *,
    genre_ids=(28,),
    vote_average: float = 8.0,
    release_date: str = "2020-01-01",
    popularity: float = 50.0,
    original_language: str = "en",
    **extra,
) -> CatalogMovie:
    return CatalogMovie(
        id=movie_id,
        genre_ids=list(genre_ids),
        vote_average=vote_average,
        release_date=release_date,
        popularity=popularity,
        original_language=original_language,
        **extra,
    )


@pytest.fixture()
def clock():
    return lambda: FIXED_NOW


@pytest.fixture()
def kv():
    return RecordingKeyValue()


@pytest.fixture()
def store(kv, clock):
    return PreferenceStore(client=kv, session_id="test", clock=clock)


@pytest.fixture()
def failing_store(clock):
    return PreferenceStore(client=FailingKeyValue(), session_id="test", clock=clock)


@pytest.fixture()
def movie():
    return make_movie
