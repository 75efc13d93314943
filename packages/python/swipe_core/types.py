from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Annotated, Mapping, Tuple

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_serializer,
    model_validator,
)

from .config import DEFAULT_LANGUAGES, DEFAULT_MINIMUM_RATING, DEFAULT_YEAR_MIN
from .errors import ValidationError

MovieId = int
GenreId = int


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _validate_years(t: Tuple[int, int]) -> Tuple[int, int]:
    start, end = t
    if start > end:
        raise ValueError("year_range start must be <= end")
    if start < 1878 or end > 2100:  # arbitrary sanity bounds
        raise ValueError("year_range is out of reasonable bounds")
    return t


YearRange = Annotated[Tuple[int, int], AfterValidator(_validate_years)]


def _default_year_range() -> Tuple[int, int]:
    return (DEFAULT_YEAR_MIN, utcnow().year)


class InteractionAction(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"
    SKIP = "skip"


class CatalogMovie(BaseModel):
    """Normalized TMDB movie record as consumed by scoring and the preference store."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    id: MovieId
    genre_ids: list[GenreId]
    vote_average: float = Field(ge=0.0, le=10.0)
    popularity: float = Field(ge=0.0)
    original_language: str
    # TMDB omits or blanks this for unreleased titles
    release_date: str = ""
    title: str | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_count: int | None = None
    adult: bool = False

    @model_validator(mode="before")
    @classmethod
    def _genre_ids_from_details(cls, data: Any) -> Any:
        # /movie/{id} returns `genres: [{id, name}]` instead of `genre_ids`
        if isinstance(data, Mapping) and "genre_ids" not in data and "genres" in data:
            data = dict(data)
            data["genre_ids"] = [g["id"] for g in data.get("genres") or [] if "id" in g]
        return data

    @property
    def release_year(self) -> int | None:
        s = (self.release_date or "").strip()
        if not s:
            return None
        try:
            return datetime.fromisoformat(s.replace("Z", "+00:00")).year
        except ValueError:
            head = s[:4]
            return int(head) if head.isdigit() else None


def coerce_movie(item: CatalogMovie | Mapping[str, Any]) -> CatalogMovie:
    if isinstance(item, CatalogMovie):
        return item
    try:
        return CatalogMovie.model_validate(item)
    except PydanticValidationError as e:
        raise ValidationError(f"invalid catalog item: {e.error_count()} error(s): {e}") from e


class PreferenceProfile(BaseModel):
    favorite_genres: set[GenreId] = Field(default_factory=set)
    disliked_genres: set[GenreId] = Field(default_factory=set)
    year_range: YearRange = Field(default_factory=_default_year_range)
    minimum_rating: float = Field(default=DEFAULT_MINIMUM_RATING, ge=0.0, le=10.0)
    languages: list[str] = Field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    exclude_adult: bool = True
    last_updated: datetime | None = None  # None until first persisted

    @model_validator(mode="after")
    def _genres_disjoint(self) -> "PreferenceProfile":
        both = self.favorite_genres & self.disliked_genres
        if both:
            raise ValueError(
                f"genres cannot be both favorite and disliked: {sorted(both)}"
            )
        return self

    @field_serializer("favorite_genres", "disliked_genres")
    def _sorted_genres(self, v: set[GenreId]) -> list[GenreId]:
        return sorted(v)

    def same_preferences(self, other: "PreferenceProfile") -> bool:
        """Equality ignoring the persistence timestamp."""
        return self.model_dump(exclude={"last_updated"}) == other.model_dump(
            exclude={"last_updated"}
        )


class InteractionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: MovieId
    action: InteractionAction
    timestamp: datetime
    genres: frozenset[GenreId]  # snapshot at interaction time
    rating: float  # snapshot at interaction time

    @field_serializer("genres")
    def _sorted_genres(self, v: frozenset[GenreId]) -> list[GenreId]:
        return sorted(v)


class PreferenceWeights(BaseModel):
    """Per-factor weights. Not normalized: they are a tuning knob, not a simplex."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    genre: float = Field(default=0.4, ge=0.0)
    rating: float = Field(default=0.2, ge=0.0)
    recency: float = Field(default=0.15, ge=0.0)
    popularity: float = Field(default=0.15, ge=0.0)
    language: float = Field(default=0.1, ge=0.0)


DEFAULT_WEIGHTS = PreferenceWeights()
