from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from swipe_core.types import PreferenceProfile


class LoadStatus(str, Enum):
    LOADED = "loaded"
    MISSING = "missing"  # nothing stored yet; defaults
    FALLBACK = "fallback"  # storage or decode failure; defaults


@dataclass(frozen=True)
class LoadResult:
    profile: PreferenceProfile
    status: LoadStatus
    error: str | None = None

    @property
    def used_defaults(self) -> bool:
        return self.status != LoadStatus.LOADED


class PreferenceStatistics(BaseModel):
    total: int
    likes: int
    dislikes: int
    skips: int
    favorite_genre_count: int
    disliked_genre_count: int
    last_updated: datetime | None = None
