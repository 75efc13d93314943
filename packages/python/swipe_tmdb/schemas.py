from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from swipe_core.types import CatalogMovie, PreferenceProfile, YearRange

SortBy = Literal["popularity.desc", "vote_average.desc", "release_date.desc"]


class Genre(BaseModel):
    id: int
    name: str


class ProductionCompany(BaseModel):
    id: int
    name: str
    logo_path: str | None = None
    origin_country: str | None = None


class CastMember(BaseModel):
    id: int
    name: str
    character: str | None = None
    profile_path: str | None = None
    order: int | None = None


class CrewMember(BaseModel):
    id: int
    name: str
    job: str | None = None
    department: str | None = None
    profile_path: str | None = None


class Credits(BaseModel):
    cast: list[CastMember] = Field(default_factory=list)
    crew: list[CrewMember] = Field(default_factory=list)


class MovieDetails(CatalogMovie):
    genres: list[Genre] = Field(default_factory=list)
    runtime: int | None = None
    tagline: str | None = None
    production_companies: list[ProductionCompany] = Field(default_factory=list)
    credits: Credits | None = None


class MovieResponse(BaseModel):
    page: int
    results: list[CatalogMovie] = Field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0


class MovieFilters(BaseModel):
    genres: list[int] = Field(default_factory=list)
    year_range: YearRange | None = None
    rating_min: float | None = Field(default=None, ge=0.0, le=10.0)
    language: str | None = None
    sort_by: SortBy = "popularity.desc"
    include_adult: bool = False

    @classmethod
    def from_profile(cls, profile: PreferenceProfile) -> "MovieFilters":
        # a language filter only makes sense with a single preferred language
        language = profile.languages[0] if len(profile.languages) == 1 else None
        return cls(
            year_range=profile.year_range,
            rating_min=profile.minimum_rating,
            language=language,
            include_adult=not profile.exclude_adult,
        )

    def to_params(self, page: int = 1) -> dict[str, Any]:
        params: dict[str, Any] = {
            "page": page,
            "sort_by": self.sort_by,
            "include_adult": str(self.include_adult).lower(),
            "include_video": "false",
        }
        if self.genres:
            params["with_genres"] = ",".join(str(g) for g in self.genres)
        if self.year_range:
            start, end = self.year_range
            params["primary_release_date.gte"] = f"{start}-01-01"
            params["primary_release_date.lte"] = f"{end}-12-31"
        if self.rating_min:
            params["vote_average.gte"] = self.rating_min
        if self.language:
            params["with_original_language"] = self.language
        return params
