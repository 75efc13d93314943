import pytest
from pydantic import ValidationError as PydanticValidationError

from swipe_core.errors import ValidationError
from swipe_core.types import PreferenceProfile, PreferenceWeights
from swipe_ranking.scoring import score_batch, score_item


def _profile(**kw) -> PreferenceProfile:
    base = dict(favorite_genres={28}, disliked_genres=set(), minimum_rating=6.0, languages=["en"])
    base.update(kw)
    return PreferenceProfile(**base)


def test_worked_example_scores_0_735(movie):
    res = score_item(movie(genre_ids=[28]), _profile(), current_year=2024)

    feats = res.breakdown.features
    assert feats["genre"].value == pytest.approx(0.7)
    assert feats["rating"].value == pytest.approx(0.8)
    assert feats["recency"].value == pytest.approx(0.8)
    assert feats["popularity"].value == pytest.approx(0.5)
    assert feats["language"].value == pytest.approx(1.0)
    assert res.score == pytest.approx(0.735)
    assert res.item_id == 1


def test_reasons_come_from_genre_rating_and_language_only(movie):
    profile = _profile(favorite_genres={28}, disliked_genres={27})
    res = score_item(movie(genre_ids=[28, 27]), profile, current_year=2024)

    assert res.reasons == [
        "Matches 1 favorite genre(s)",
        "Contains 1 disliked genre(s)",
        "High rating: 8.0/10",
        "Preferred language: en",
    ]
    assert list(res.breakdown.features) == ["genre", "rating", "recency", "popularity", "language"]


@pytest.mark.parametrize(
    "vote, shown", [(7.25, "7.3"), (8.25, "8.3"), (8.45, "8.4"), (10.0, "10.0")]
)
def test_rating_reason_rounds_half_up(movie, vote, shown):
    res = score_item(movie(vote_average=vote), _profile(minimum_rating=5.0), current_year=2024)

    assert f"High rating: {shown}/10" in res.reasons


def test_rating_below_floor_is_halved_without_reason(movie):
    res = score_item(movie(vote_average=5.0), _profile(minimum_rating=6.0), current_year=2024)

    assert res.breakdown.features["rating"].value == pytest.approx(0.25)
    assert not any(r.startswith("High rating") for r in res.reasons)


def test_genre_factor_caps_and_floors(movie):
    many_favs = _profile(favorite_genres={1, 2, 3})
    assert score_item(movie(genre_ids=[1, 2, 3]), many_favs, current_year=2024).breakdown.features[
        "genre"
    ].value == pytest.approx(1.0)

    many_dislikes = _profile(favorite_genres=set(), disliked_genres={1, 2})
    assert score_item(movie(genre_ids=[1, 2]), many_dislikes, current_year=2024).breakdown.features[
        "genre"
    ].value == pytest.approx(0.0)


def test_other_language_keeps_nonzero_floor(movie):
    res = score_item(movie(original_language="ko"), _profile(), current_year=2024)

    assert res.breakdown.features["language"].value == pytest.approx(0.3)
    assert "Preferred language: ko" not in res.reasons


def test_future_release_year_exceeds_one_before_final_clamp(movie):
    weights = PreferenceWeights(genre=0, rating=0, recency=1.0, popularity=0, language=0)
    res = score_item(movie(release_date="2034-05-01"), _profile(), weights, current_year=2024)

    assert res.breakdown.features["recency"].value == pytest.approx(1.5)
    assert res.score == 1.0


def test_old_or_undated_movies_get_no_recency(movie):
    old = score_item(movie(release_date="1980-01-01"), _profile(), current_year=2024)
    undated = score_item(movie(release_date=""), _profile(), current_year=2024)

    assert old.breakdown.features["recency"].value == 0.0
    assert undated.breakdown.features["recency"].value == 0.0


def test_unnormalized_weights_scale_proportionally(movie):
    item = movie(genre_ids=[99], vote_average=2.0, popularity=1.0, original_language="fr")
    w = PreferenceWeights(genre=0.1, rating=0.1, recency=0.05, popularity=0.05, language=0.1)
    w2 = PreferenceWeights(genre=0.2, rating=0.2, recency=0.1, popularity=0.1, language=0.2)

    one = score_item(item, _profile(), w, current_year=2024).score
    two = score_item(item, _profile(), w2, current_year=2024).score
    assert two == pytest.approx(2 * one)


@pytest.mark.parametrize(
    "weights",
    [
        PreferenceWeights(),
        PreferenceWeights(genre=0, rating=0, recency=0, popularity=0, language=0),
        PreferenceWeights(genre=5, rating=5, recency=5, popularity=5, language=5),
    ],
)
def test_score_is_always_within_unit_interval(movie, weights):
    profiles = [
        PreferenceProfile(),
        _profile(favorite_genres={1, 2, 3}),
        _profile(favorite_genres=set(), disliked_genres={1, 2, 3}, minimum_rating=9.5),
    ]
    items = [
        movie(1, genre_ids=[1, 2, 3], vote_average=10, popularity=900, release_date="2030-01-01"),
        movie(2, genre_ids=[], vote_average=0, popularity=0, release_date="1950-01-01"),
        movie(3, genre_ids=[2], vote_average=6.5, popularity=42, original_language="ja"),
    ]
    for profile in profiles:
        for item in items:
            res = score_item(item, profile, weights, current_year=2024)
            assert 0.0 <= res.score <= 1.0


def test_negative_weights_are_rejected():
    with pytest.raises(PydanticValidationError):
        PreferenceWeights(genre=-0.1)


def test_scoring_is_idempotent(movie):
    item = movie(genre_ids=[28, 12])
    profile = _profile()

    assert score_item(item, profile, current_year=2024) == score_item(item, profile, current_year=2024)


def test_accepts_raw_catalog_records():
    raw = {
        "id": 603,
        "title": "The Matrix",
        "genre_ids": [28, 878],
        "vote_average": 8.2,
        "release_date": "1999-03-30",
        "popularity": 80.5,
        "original_language": "en",
        "adult": False,
    }
    res = score_item(raw, _profile(), current_year=2024)
    assert res.item_id == 603


def test_malformed_item_raises_validation_error():
    with pytest.raises(ValidationError):
        score_item({"id": 1, "genre_ids": [28]}, _profile(), current_year=2024)


def test_batch_is_sorted_descending(movie):
    items = [
        movie(1, genre_ids=[99], vote_average=3.0, popularity=1.0),
        movie(2, genre_ids=[28], vote_average=9.0, popularity=90.0),
        movie(3, genre_ids=[28], vote_average=7.0, popularity=40.0),
    ]
    ranked = score_batch(items, _profile(), current_year=2024)

    assert [r.item_id for r in ranked] == [2, 3, 1]
    assert ranked[0].score >= ranked[1].score >= ranked[2].score


def test_batch_keeps_input_order_for_equal_scores(movie):
    items = [movie(i, genre_ids=[28]) for i in (5, 3, 9, 1)]
    items.insert(2, movie(42, genre_ids=[28], vote_average=9.9))

    ranked = score_batch(items, _profile(), current_year=2024)

    assert ranked[0].item_id == 42
    assert [r.item_id for r in ranked[1:]] == [5, 3, 9, 1]
