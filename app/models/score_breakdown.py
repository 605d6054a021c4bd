"""Explainable score payloads for the score explainer modal."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ScoreComponent(BaseModel):
    """Weighted input into a composite score."""

    name: str
    value: float
    weight: float = Field(ge=0, le=1)
    contribution: float
    source: str


class Comparable(BaseModel):
    name: str
    score: float
    industry: str
    stage: str
    note: str


class ScoreBreakdown(BaseModel):
    """Composite score with its weighted components and peer references."""

    entity_id: int
    entity_name: str
    score_name: str
    value: float
    max_value: float
    percentile: int = Field(ge=0, le=100)
    formula: str
    components: list[ScoreComponent]
    comparables: list[Comparable] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)
    category_median: float
    category_top_percentile: float
    last_updated: datetime

    @property
    def weight_total(self) -> float:
        """Sum of component weights; expected to be 1.0 but not enforced."""
        return round(sum(component.weight for component in self.components), 6)
