from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class FeatureContribution:
    feature: str  # "genre", "rating", "recency", "popularity", "language"
    value: float  # factor value before weighting
    weight: float  # weight used in this run
    contribution: float  # weight * value


@dataclass(frozen=True)
class ScoreBreakdown:
    features: Dict[str, FeatureContribution]  # keyed by feature name, factor order

    @property
    def total(self) -> float:
        return sum(fc.contribution for fc in self.features.values())


@dataclass(frozen=True)
class ScoreResult:
    item_id: int
    score: float  # clamped to [0, 1]
    reasons: list[str] = field(default_factory=list)
    breakdown: ScoreBreakdown | None = None
