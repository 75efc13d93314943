from __future__ import annotations

from typing import Sequence

from swipe_core.config import (
    RATING_FLOOR_LOWEST,
    RATING_FLOOR_MARGIN,
    RATING_FLOOR_MIN_LIKES,
)
from swipe_core.types import (
    CatalogMovie,
    InteractionAction,
    InteractionRecord,
    PreferenceProfile,
)


def liked(interactions: Sequence[InteractionRecord]) -> list[InteractionRecord]:
    return [i for i in interactions if i.action == InteractionAction.LIKE]


def rating_floor(interactions: Sequence[InteractionRecord]) -> float | None:
    """
    Minimum rating implied by the full like history, or None while there are
    not enough likes. Recomputed from scratch each time, never incrementally.
    """
    likes = liked(interactions)
    if len(likes) <= RATING_FLOOR_MIN_LIKES:
        return None
    avg = sum(i.rating for i in likes) / len(likes)
    return max(RATING_FLOOR_LOWEST, avg - RATING_FLOOR_MARGIN)


def apply_interaction(
    profile: PreferenceProfile,
    movie: CatalogMovie,
    action: InteractionAction,
    interactions: Sequence[InteractionRecord],
) -> PreferenceProfile:
    """
    Mutate `profile` in place for one interaction and return it.

    `interactions` is the log already including this interaction.
    A disliked genre is never re-added to favorites by a later like.
    """
    if action == InteractionAction.LIKE:
        for genre_id in movie.genre_ids:
            if genre_id not in profile.disliked_genres:
                profile.favorite_genres.add(genre_id)
        floor = rating_floor(interactions)
        if floor is not None:
            profile.minimum_rating = floor
    elif action == InteractionAction.DISLIKE:
        for genre_id in movie.genre_ids:
            profile.favorite_genres.discard(genre_id)
            profile.disliked_genres.add(genre_id)
    # skip: logged only
    return profile
