"""Score breakdowns for the score explainer, with a synthesised fallback."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from app.models.score_breakdown import ScoreBreakdown, ScoreComponent

logger = logging.getLogger(__name__)

DEFAULT_SCORE_NAME = "mvp90_overall_score"
WEIGHT_TOLERANCE = 1e-6

_OVERALL_FORMULA = (
    "Weighted average of novelty (30%), replicability inverse (25%), traction (20%), "
    "team quality (15%), and market fit (10%)"
)

_BREAKDOWNS: dict[tuple[int, str], dict[str, Any]] = {
    (1, "mvp90_overall_score"): {
        "entity_name": "NeuroLink AI",
        "value": 8.7,
        "max_value": 10,
        "percentile": 92,
        "formula": _OVERALL_FORMULA,
        "components": [
            ("Novelty Score", 9.0, 0.30, 2.7, "ML Pipeline - Keyword uniqueness analysis"),
            ("Replicability (Inverse)", 8.0, 0.25, 2.0, "Technical complexity and moat analysis"),
            ("Traction Signals", 8.5, 0.20, 1.7, "GitHub stars, social media, user engagement"),
            ("Team Quality", 9.2, 0.15, 1.38, "Founder background, network, experience"),
            ("Market Fit", 8.2, 0.10, 0.82, "India market analysis, TAM assessment"),
        ],
        "comparables": [
            ("BrainTech Solutions", 8.9, "AI/ML", "Series A", "Similar brain-computer interface, higher team score"),
            ("CogniCare", 7.8, "AI/ML", "Seed", "Lower technical complexity, failed execution"),
            ("NeuroFlow", 8.4, "HealthTech", "Series A", "Adjacent market, strong traction"),
        ],
        "insights": [
            "Exceptional novelty score driven by breakthrough neural interface technology",
            "Strong team quality with ex-Neuralink and Stanford PhD credentials",
            "High technical barriers create significant competitive moat",
            "Market timing favorable with increasing interest in brain-computer interfaces",
        ],
        "category_median": 6.8,
        "category_top_percentile": 8.5,
    },
    (1, "originality_score"): {
        "entity_name": "NeuroLink AI",
        "value": 78,
        "max_value": 100,
        "percentile": 89,
        "formula": "Keyword uniqueness (40%) + Technical novelty (35%) + Market differentiation (25%)",
        "components": [
            ("Keyword Uniqueness", 85, 0.40, 34, "NLP analysis of pitch and technical descriptions"),
            ("Technical Novelty", 82, 0.35, 28.7, "Patent analysis and research paper citations"),
            ("Market Differentiation", 62, 0.25, 15.5, "Competitive landscape analysis"),
        ],
        "comparables": [
            ("Neuralink", 95, "AI/ML", "Growth", "Pioneer in brain-computer interfaces"),
            ("Kernel", 72, "AI/ML", "Series B", "Similar approach, less technical depth"),
            ("Paradromics", 81, "AI/ML", "Series A", "High-bandwidth neural interfaces"),
        ],
        "insights": [
            "High keyword uniqueness indicates novel approach to neural interfaces",
            "Strong technical novelty backed by peer-reviewed research",
            "Market differentiation limited by existing players like Neuralink",
            "Non-invasive approach provides unique positioning advantage",
        ],
        "category_median": 45,
        "category_top_percentile": 75,
    },
    (1, "replicability_score"): {
        "entity_name": "NeuroLink AI",
        "value": 34,
        "max_value": 100,
        "percentile": 15,
        "formula": (
            "Technical complexity (inverse 40%) + Resource requirements (30%) + "
            "IP protection (20%) + Team uniqueness (10%)"
        ),
        "components": [
            ("Technical Complexity (Inverse)", 15, 0.40, 6, "Code complexity analysis and technical depth"),
            ("Resource Requirements", 25, 0.30, 7.5, "Capital intensity and specialized equipment needs"),
            ("IP Protection", 45, 0.20, 9, "Patent filings and trade secrets"),
            ("Team Uniqueness", 85, 0.10, 8.5, "Founder background and network exclusivity"),
        ],
        "comparables": [
            ("OpenAI", 28, "AI/ML", "Growth", "Extremely difficult to replicate, massive resources"),
            ("DeepMind", 22, "AI/ML", "Acquired", "World-class team, cutting-edge research"),
            ("Anthropic", 31, "AI/ML", "Series C", "Strong technical moat, specialized expertise"),
        ],
        "insights": [
            "Very low replicability due to extreme technical complexity",
            "Requires specialized neuroscience and hardware expertise",
            "High capital requirements for R&D and equipment",
            "Unique team with rare combination of skills creates strong moat",
        ],
        "category_median": 65,
        "category_top_percentile": 25,
    },
    (2, "mvp90_overall_score"): {
        "entity_name": "CropSense",
        "value": 7.4,
        "max_value": 10,
        "percentile": 78,
        "formula": _OVERALL_FORMULA,
        "components": [
            ("Novelty Score", 7.0, 0.30, 2.1, "ML Pipeline - Keyword uniqueness analysis"),
            ("Replicability (Inverse)", 4.0, 0.25, 1.0, "Technical complexity and moat analysis"),
            ("Traction Signals", 8.2, 0.20, 1.64, "Government partnerships, pilot results"),
            ("Team Quality", 7.8, 0.15, 1.17, "Domain expertise, execution track record"),
            ("Market Fit", 9.0, 0.10, 0.9, "India agriculture market, farmer adoption"),
        ],
        "comparables": [
            ("FarmLogs", 7.1, "AgTech", "Acquired", "Similar precision agriculture, US market focus"),
            ("Taranis", 7.8, "AgTech", "Series C", "AI-powered crop monitoring, global scale"),
            ("Prospera", 7.6, "AgTech", "Series B", "Computer vision for agriculture"),
        ],
        "insights": [
            "Strong market fit for Indian agriculture sector",
            "Government validation provides significant traction boost",
            "Lower technical barriers increase replication risk",
            "Solid execution team with deep domain knowledge",
        ],
        "category_median": 6.2,
        "category_top_percentile": 7.9,
    },
}

# (name, weight, raw range on a 0-100 scale, source)
FALLBACK_COMPONENTS: tuple[tuple[str, float, tuple[int, int], str], ...] = (
    ("Primary Factor", 0.40, (70, 99), "Primary analysis pipeline"),
    ("Secondary Factor", 0.35, (60, 89), "Secondary analysis pipeline"),
    ("Tertiary Factor", 0.25, (50, 89), "Tertiary analysis pipeline"),
)

FALLBACK_INSIGHTS = (
    "Score calculated using proprietary algorithm",
    "Multiple factors contribute to overall assessment",
    "Comparative analysis against industry benchmarks",
)


def fallback_max_value(score_name: str) -> int:
    """Percent-style scores use 100; the overall score and anything else use 10."""
    if "score" in score_name and "overall" not in score_name:
        return 100
    return 10


class ScoreBreakdownCatalog:
    """Lookup keyed by ``(entity_id, score_name)``.

    Unknown combinations never miss: a generic breakdown is synthesised whose
    component contributions add up to the reported value.
    """

    def __init__(
        self,
        breakdowns: dict[tuple[int, str], dict[str, Any]] | None = None,
        *,
        rng: random.Random | None = None,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._breakdowns = breakdowns if breakdowns is not None else _BREAKDOWNS
        self._rng = rng or random.Random()
        self._now = now

    def keys(self) -> list[tuple[int, str]]:
        return list(self._breakdowns)

    def get(self, entity_id: int, score_name: str = DEFAULT_SCORE_NAME) -> ScoreBreakdown:
        record = self._breakdowns.get((entity_id, score_name))
        if record is None:
            logger.info(
                "score_breakdown.fallback",
                extra={"entity_id": entity_id, "score_name": score_name},
            )
            breakdown = self._fallback(entity_id, score_name)
        else:
            breakdown = self._from_record(entity_id, score_name, record)
        if abs(breakdown.weight_total - 1.0) > WEIGHT_TOLERANCE:
            logger.warning(
                "score_breakdown.weights_unbalanced",
                extra={
                    "entity_id": entity_id,
                    "score_name": score_name,
                    "weight_total": breakdown.weight_total,
                },
            )
        return breakdown

    def _from_record(self, entity_id: int, score_name: str, record: dict[str, Any]) -> ScoreBreakdown:
        return ScoreBreakdown(
            entity_id=entity_id,
            entity_name=record["entity_name"],
            score_name=score_name,
            value=record["value"],
            max_value=record["max_value"],
            percentile=record["percentile"],
            formula=record["formula"],
            components=[
                ScoreComponent(name=name, value=value, weight=weight, contribution=contribution, source=source)
                for name, value, weight, contribution, source in record["components"]
            ],
            comparables=[
                {"name": name, "score": score, "industry": industry, "stage": stage, "note": note}
                for name, score, industry, stage, note in record["comparables"]
            ],
            insights=list(record["insights"]),
            category_median=record["category_median"],
            category_top_percentile=record["category_top_percentile"],
            last_updated=self._now(),
        )

    def _fallback(self, entity_id: int, score_name: str) -> ScoreBreakdown:
        max_value = fallback_max_value(score_name)
        scale = max_value / 100

        components = []
        for name, weight, (low, high), source in FALLBACK_COMPONENTS:
            value = round(self._rng.randint(low, high) * scale, 2)
            components.append(
                ScoreComponent(
                    name=name,
                    value=value,
                    weight=weight,
                    contribution=round(value * weight, 2),
                    source=source,
                )
            )
        total = round(sum(component.contribution for component in components), 2)

        return ScoreBreakdown(
            entity_id=entity_id,
            entity_name=f"Entity {entity_id}",
            score_name=score_name,
            value=total,
            max_value=max_value,
            percentile=self._rng.randint(50, 99),
            formula="Composite scoring algorithm with multiple weighted factors",
            components=components,
            comparables=[
                {
                    "name": "Comparable A",
                    "score": round(self._rng.randint(70, 89) * scale, 2),
                    "industry": "Similar",
                    "stage": "Series A",
                    "note": "Similar business model and market",
                },
                {
                    "name": "Comparable B",
                    "score": round(self._rng.randint(60, 79) * scale, 2),
                    "industry": "Adjacent",
                    "stage": "Seed",
                    "note": "Adjacent market with similar approach",
                },
            ],
            insights=list(FALLBACK_INSIGHTS),
            category_median=round(self._rng.randint(50, 69) * scale, 2),
            category_top_percentile=round(self._rng.randint(80, 94) * scale, 2),
            last_updated=self._now(),
        )


_CATALOG = ScoreBreakdownCatalog()


def get_score_breakdown_catalog() -> ScoreBreakdownCatalog:
    return _CATALOG
