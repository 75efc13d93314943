from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Union

from swipe_core.settings import Settings
from swipe_core.types import (
    CatalogMovie,
    InteractionAction,
    PreferenceProfile,
    PreferenceWeights,
    utcnow,
)
from swipe_ranking.scoring import score_batch, score_item
from swipe_ranking.types import ScoreResult

from .preferences.kv_backends import make_kv_client
from .preferences.preference_store import PreferenceStore
from .preferences.schemas import PreferenceStatistics

log = logging.getLogger(__name__)

MovieLike = Union[CatalogMovie, Mapping[str, Any]]


class PreferenceSession:
    """
    One user session: owns the preference store handle and scores catalog
    movies against its current profile. Construct once per session; there is
    exactly one writer per session, so no locking is done.
    """

    def __init__(
        self,
        store: PreferenceStore,
        *,
        weights: PreferenceWeights | None = None,
        clock: Callable[[], Any] = utcnow,
    ):
        self.store = store
        self.weights = weights
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, session_id: str) -> "PreferenceSession":
        store = PreferenceStore(
            client=make_kv_client(settings.redis_url),
            session_id=session_id,
            namespace=settings.storage_namespace,
            ttl_sec=settings.session_ttl_sec,
        )
        if not settings.redis_url:
            log.info("no REDIS_URL configured; preferences kept in process memory")
        return cls(store)

    def _current_year(self) -> int:
        return self._clock().year

    # ---- preferences ----

    def load_profile(self) -> PreferenceProfile:
        return self.store.load().profile

    def record_interaction(self, item: MovieLike, action: InteractionAction | str) -> None:
        self.store.record_interaction(item, action)

    def reset_profile(self) -> None:
        self.store.reset()

    def update_profile(self, profile: PreferenceProfile) -> bool:
        """Replace the stored profile wholesale (e.g. languages edited by the user)."""
        return self.store.save(profile)

    def statistics(self) -> PreferenceStatistics:
        return self.store.statistics()

    # ---- scoring ----

    def score_item(
        self,
        item: MovieLike,
        profile: PreferenceProfile | None = None,
        weights: PreferenceWeights | None = None,
    ) -> ScoreResult:
        return score_item(
            item,
            profile if profile is not None else self.load_profile(),
            weights or self.weights,
            current_year=self._current_year(),
        )

    def score_batch(
        self,
        items: Iterable[MovieLike],
        profile: PreferenceProfile | None = None,
        weights: PreferenceWeights | None = None,
    ) -> list[ScoreResult]:
        return score_batch(
            items,
            profile if profile is not None else self.load_profile(),
            weights or self.weights,
            current_year=self._current_year(),
        )
