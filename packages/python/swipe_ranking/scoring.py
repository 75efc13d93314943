"""
Five-factor relevance scoring of catalog movies against a preference profile.

Each factor produces a value before weighting; only the genre factor and the
final total are clamped. Reasons are emitted for the genre, rating and
language factors only; the breakdown carries every factor.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Sequence, Union

from swipe_core.config import (
    BELOW_FLOOR_RATING_FACTOR,
    GENRE_BASELINE,
    GENRE_DISLIKE_PENALTY,
    GENRE_FAVORITE_BOOST,
    OTHER_LANGUAGE_SCORE,
    POPULARITY_SATURATION,
    RATING_SCALE,
    RECENCY_HORIZON_YEARS,
)
from swipe_core.types import (
    DEFAULT_WEIGHTS,
    CatalogMovie,
    PreferenceProfile,
    PreferenceWeights,
    coerce_movie,
    utcnow,
)

from .types import FeatureContribution, ScoreBreakdown, ScoreResult

MovieLike = Union[CatalogMovie, Mapping[str, Any]]


def _clamp01(x: float) -> float:
    return 0.0 if x <= 0.0 else 1.0 if x >= 1.0 else x


def _one_decimal(x: float) -> str:
    # half-up on the exact binary value, so 7.25 reads 7.3 but 8.45 reads 8.4
    return str(Decimal(x).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


# ---- per-factor values ----


def genre_factor(
    genre_ids: Sequence[int], profile: PreferenceProfile
) -> tuple[float, list[str]]:
    reasons: list[str] = []
    favorite = [g for g in genre_ids if g in profile.favorite_genres]
    disliked = [g for g in genre_ids if g in profile.disliked_genres]

    score = GENRE_BASELINE
    if favorite:
        score = min(1.0, GENRE_BASELINE + len(favorite) * GENRE_FAVORITE_BOOST)
        reasons.append(f"Matches {len(favorite)} favorite genre(s)")
    if disliked:
        score = max(0.0, score - len(disliked) * GENRE_DISLIKE_PENALTY)
        reasons.append(f"Contains {len(disliked)} disliked genre(s)")
    return score, reasons


def rating_factor(vote_average: float, minimum_rating: float) -> tuple[float, list[str]]:
    value = min(1.0, vote_average / RATING_SCALE)
    if vote_average >= minimum_rating:
        return value, [f"High rating: {_one_decimal(vote_average)}/10"]
    # soft penalty below the adaptive floor, not a filter
    return value * BELOW_FLOOR_RATING_FACTOR, []


def recency_factor(release_year: int | None, current_year: int) -> float:
    # Future release years yield values above 1; only the final score is clamped.
    if release_year is None:
        return 0.0
    return max(0.0, 1.0 - (current_year - release_year) / RECENCY_HORIZON_YEARS)


def popularity_factor(popularity: float) -> float:
    return min(1.0, popularity / POPULARITY_SATURATION)


def language_factor(
    original_language: str, languages: Sequence[str]
) -> tuple[float, list[str]]:
    if original_language in languages:
        return 1.0, [f"Preferred language: {original_language}"]
    return OTHER_LANGUAGE_SCORE, []


# ---- scoring ----


def _contribution(feature: str, value: float, weight: float) -> FeatureContribution:
    return FeatureContribution(
        feature=feature, value=value, weight=weight, contribution=weight * value
    )


def score_item(
    item: MovieLike,
    profile: PreferenceProfile,
    weights: PreferenceWeights | None = None,
    *,
    current_year: int | None = None,
) -> ScoreResult:
    """
    Score one catalog movie against `profile`.

    `current_year` is the reference year for recency; it defaults to the
    current UTC year, so pass it explicitly for reproducible results.
    Raises swipe_core.errors.ValidationError on a malformed item.
    """
    movie = coerce_movie(item)
    w = weights or DEFAULT_WEIGHTS
    year = current_year if current_year is not None else utcnow().year

    g, g_reasons = genre_factor(movie.genre_ids, profile)
    r, r_reasons = rating_factor(movie.vote_average, profile.minimum_rating)
    rcy = recency_factor(movie.release_year, year)
    p = popularity_factor(movie.popularity)
    lang, lang_reasons = language_factor(movie.original_language, profile.languages)

    breakdown = ScoreBreakdown(
        features={
            "genre": _contribution("genre", g, w.genre),
            "rating": _contribution("rating", r, w.rating),
            "recency": _contribution("recency", rcy, w.recency),
            "popularity": _contribution("popularity", p, w.popularity),
            "language": _contribution("language", lang, w.language),
        }
    )
    return ScoreResult(
        item_id=movie.id,
        score=_clamp01(breakdown.total),
        reasons=[*g_reasons, *r_reasons, *lang_reasons],
        breakdown=breakdown,
    )


def rank_results(results: Iterable[ScoreResult]) -> list[ScoreResult]:
    # sorted() is stable with reverse=True: equal scores keep input order
    return sorted(results, key=lambda res: res.score, reverse=True)


def score_batch(
    items: Iterable[MovieLike],
    profile: PreferenceProfile,
    weights: PreferenceWeights | None = None,
    *,
    current_year: int | None = None,
) -> list[ScoreResult]:
    year = current_year if current_year is not None else utcnow().year
    return rank_results(
        score_item(it, profile, weights, current_year=year) for it in items
    )
