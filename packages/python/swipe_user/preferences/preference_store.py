from __future__ import annotations

import gzip
import json
import logging
import zlib
from typing import Any, Callable, Mapping, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from redis.exceptions import RedisError

from swipe_core.config import (
    INTERACTIONS_KEY,
    MAX_INTERACTIONS,
    PROFILE_KEY,
    STORAGE_NAMESPACE,
)
from swipe_core.errors import ValidationError
from swipe_core.types import (
    CatalogMovie,
    InteractionAction,
    InteractionRecord,
    PreferenceProfile,
    coerce_movie,
    utcnow,
)

from .kv_backends import KeyValueClient
from .rules import apply_interaction
from .schemas import LoadResult, LoadStatus, PreferenceStatistics

log = logging.getLogger(__name__)

_STORAGE_ERRORS = (RedisError, OSError, RuntimeError)
_DECODE_ERRORS = (OSError, EOFError, zlib.error, ValueError, TypeError, RecursionError)

_InteractionLog = TypeAdapter(list[InteractionRecord])


class PreferenceStore:
    """
    Session-scoped home of one PreferenceProfile and its interaction log.

    Keys: {namespace}{session_id}:preferences and {namespace}{session_id}:interactions,
    each holding a gzip'd JSON blob. Storage is best-effort: failures are
    logged and reported through return values, never raised.
    """

    def __init__(
        self,
        *,
        client: KeyValueClient,
        session_id: str = "default",
        namespace: str = STORAGE_NAMESPACE,
        capacity: int = MAX_INTERACTIONS,
        ttl_sec: int | None = None,
        compression_level: int = 5,
        clock: Callable[[], Any] = utcnow,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._kv = client
        self._prefix = f"{namespace}{session_id}:"
        self.capacity = int(capacity)
        self._ttl = int(ttl_sec) if ttl_sec else None
        self._level = int(compression_level)
        self._clock = clock

    # ----- keys -----

    @property
    def profile_key(self) -> str:
        return f"{self._prefix}{PROFILE_KEY}"

    @property
    def interactions_key(self) -> str:
        return f"{self._prefix}{INTERACTIONS_KEY}"

    # ----- codec -----

    def _encode(self, obj: Any) -> bytes:
        raw = json.dumps(obj, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        return gzip.compress(raw, compresslevel=self._level)

    def _decode(self, b: bytes) -> Any:
        return json.loads(gzip.decompress(b).decode("utf-8"))

    # ----- helpers -----

    def _read(self, key: str) -> bytes | None:
        return self._kv.get(key)

    def _write(self, key: str, payload: Any) -> bool:
        try:
            self._kv.set(key, self._encode(payload), ex=self._ttl)
        except _STORAGE_ERRORS as e:
            log.warning("preference storage write failed for %s: %s", key, e)
            return False
        return True

    # ----- profile -----

    def load(self) -> LoadResult:
        try:
            blob = self._read(self.profile_key)
        except _STORAGE_ERRORS as e:
            log.warning("preference storage unavailable, using defaults: %s", e)
            return LoadResult(PreferenceProfile(), LoadStatus.FALLBACK, str(e))
        if not blob:
            return LoadResult(PreferenceProfile(), LoadStatus.MISSING)
        try:
            profile = PreferenceProfile.model_validate(self._decode(blob))
        except _DECODE_ERRORS as e:
            log.warning("stored preferences unreadable, using defaults: %s", e)
            return LoadResult(PreferenceProfile(), LoadStatus.FALLBACK, str(e))
        return LoadResult(profile, LoadStatus.LOADED)

    def save(self, profile: PreferenceProfile) -> bool:
        # in-place edits to the genre sets bypass model validation
        try:
            PreferenceProfile.model_validate(profile.model_dump())
        except PydanticValidationError as e:
            log.warning("refusing to save invalid preferences: %s", e)
            return False
        profile.last_updated = self._clock()
        return self._write(self.profile_key, profile.model_dump(mode="json"))

    # ----- interactions -----

    def interactions(self) -> list[InteractionRecord]:
        """Stored log, newest first; empty on any storage or decode failure."""
        try:
            blob = self._read(self.interactions_key)
        except _STORAGE_ERRORS as e:
            log.warning("interaction log unavailable: %s", e)
            return []
        if not blob:
            return []
        try:
            return _InteractionLog.validate_python(self._decode(blob))
        except _DECODE_ERRORS as e:
            log.warning("stored interaction log unreadable, starting empty: %s", e)
            return []

    def record_interaction(
        self,
        item: Union[CatalogMovie, Mapping[str, Any]],
        action: InteractionAction | str,
    ) -> InteractionRecord:
        movie = coerce_movie(item)
        try:
            action = InteractionAction(action)
        except ValueError as e:
            raise ValidationError(f"unknown interaction action: {action!r}") from e

        record = InteractionRecord(
            item_id=movie.id,
            action=action,
            timestamp=self._clock(),
            genres=frozenset(movie.genre_ids),
            rating=movie.vote_average,
        )
        history = self.interactions()
        history.insert(0, record)
        del history[self.capacity :]
        self._write(
            self.interactions_key, _InteractionLog.dump_python(history, mode="json")
        )

        profile = self.load().profile
        apply_interaction(profile, movie, action, history)
        self.save(profile)
        log.debug(
            "recorded %s on movie %s (log size %d)", action.value, movie.id, len(history)
        )
        return record

    # ----- lifecycle -----

    def reset(self) -> None:
        try:
            self._kv.delete(self.profile_key, self.interactions_key)
        except _STORAGE_ERRORS as e:
            log.warning("preference reset failed: %s", e)

    def statistics(self) -> PreferenceStatistics:
        history = self.interactions()
        profile = self.load().profile
        return PreferenceStatistics(
            total=len(history),
            likes=sum(1 for i in history if i.action == InteractionAction.LIKE),
            dislikes=sum(1 for i in history if i.action == InteractionAction.DISLIKE),
            skips=sum(1 for i in history if i.action == InteractionAction.SKIP),
            favorite_genre_count=len(profile.favorite_genres),
            disliked_genre_count=len(profile.disliked_genres),
            last_updated=profile.last_updated,
        )
