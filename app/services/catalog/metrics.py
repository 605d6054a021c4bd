"""Canonical "Dive" metrics served by ``GET /api/metrics/{name}``."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from app.models.metric import Metric, MetricProvenance


@dataclass(frozen=True)
class MetricDefinition:
    """Static description of a metric; ``value`` may depend on the request time."""

    metric: str
    value: Any
    type: str
    description: str
    source: str
    unit: str | None = None
    range: str | None = None
    provenance: MetricProvenance = MetricProvenance.MOCK

    def resolve(self, now: datetime) -> Any:
        if callable(self.value):
            return self.value(now)
        if isinstance(self.value, dict):
            return dict(self.value)
        return self.value


def _days_ago(days: int) -> Callable[[datetime], str]:
    def _value(now: datetime) -> str:
        return (now - timedelta(days=days)).isoformat()

    return _value


GITHUB = "GitHub API (Mock)"
PRODUCT_HUNT = "Product Hunt RSS (Mock)"
SUPABASE = "Supabase (Mock)"
ANALYTICS = "Analytics (Mock)"
ML_PIPELINE = "ML Pipeline (Mock)"

METRIC_DEFINITIONS: tuple[MetricDefinition, ...] = (
    # Founder quality
    MetricDefinition(
        "github_activity_level", 847, "number",
        "Total commits and contributions across repositories", GITHUB, unit="commits",
    ),
    MetricDefinition(
        "repo_ownership_score", 12, "number",
        "Number of repositories owned or core-contributor roles", GITHUB, unit="repositories",
    ),
    MetricDefinition(
        "recent_dev_activity_ts", _days_ago(2), "timestamp",
        "Timestamp of last commit or push", GITHUB,
    ),
    # Product traction
    MetricDefinition(
        "producthunt_launch_presence", True, "boolean",
        "Boolean indicating Product Hunt launch record", PRODUCT_HUNT,
    ),
    MetricDefinition(
        "producthunt_upvotes", 342, "number",
        "Total upvotes received on Product Hunt", PRODUCT_HUNT, unit="upvotes",
    ),
    MetricDefinition(
        "github_stars_count", 1247, "number",
        "Stars on primary repository", GITHUB, unit="stars",
    ),
    MetricDefinition(
        "weekly_commit_frequency", 23.5, "number",
        "Average commits per week over 8-week window", GITHUB, unit="commits/week",
    ),
    MetricDefinition(
        "repo_forks_count", 89, "number",
        "Total forks across main repositories", GITHUB, unit="forks",
    ),
    MetricDefinition(
        "issue_activity_count", 0.73, "number",
        "Open to closed issue activity ratio", GITHUB, unit="ratio",
    ),
    MetricDefinition(
        "public_mvp_repo_flag", True, "boolean",
        "Boolean indicating if public MVP repository exists", GITHUB,
    ),
    # Engagement and user behaviour
    MetricDefinition(
        "saved_to_watchlist_count", 156, "number",
        "Number of users who saved this startup to watchlist", SUPABASE, unit="users",
    ),
    MetricDefinition(
        "signal_clickthrough_rate", 0.087, "number",
        "Click-through rate (clicks/views per impressions)", ANALYTICS, unit="ratio",
    ),
    MetricDefinition(
        "user_notes_comments_count", 43, "number",
        "Count of analyst notes and user comments", SUPABASE, unit="comments",
    ),
    MetricDefinition(
        "routing_action_distribution", {"build": 67, "scout": 45, "store": 23}, "object",
        "Distribution of Build/Scout/Store routing actions", ANALYTICS,
    ),
    MetricDefinition(
        "revisit_count", 89, "number",
        "Number of distinct user revisits", ANALYTICS, unit="visits",
    ),
    # Scoring and system signals
    MetricDefinition(
        "originality_score", 78, "number",
        "Keyword-uniqueness deduplication metric", ML_PIPELINE, unit="score", range="0-100",
    ),
    MetricDefinition(
        "replicability_score", 34, "number",
        "Tech openness and solo founder factor score", ML_PIPELINE, unit="score", range="0-100",
    ),
    MetricDefinition(
        "inferred_team_size", 4, "number",
        "Inferred count of authors and contributors", GITHUB, unit="people",
    ),
    MetricDefinition(
        "idea_saturation_score", 42, "number",
        "Tag density among similar signals", ML_PIPELINE, unit="score", range="0-100",
    ),
    MetricDefinition(
        "freshness_score", 91, "number",
        "Recency-based decay metric", "System (Mock)", unit="score", range="0-100",
    ),
    # Platform and ecosystem
    MetricDefinition(
        "users_saving_startup", 156, "number",
        "Unique users who saved this startup", SUPABASE, unit="users",
    ),
    MetricDefinition(
        "users_routed_to_build_or_scout", 112, "number",
        "Users routed to Build or Scout actions", ANALYTICS, unit="users",
    ),
    MetricDefinition(
        "ingestion_to_action_time", 47, "number",
        "Median time from signal ingestion to user action", ANALYTICS, unit="minutes",
    ),
    MetricDefinition(
        "tag_popularity_score", 23, "number",
        "Rarity index for assigned tags (lower = rarer)", ML_PIPELINE, unit="score",
    ),
    MetricDefinition(
        "weekly_signal_velocity_score", 8.7, "number",
        "Signals per week trend for related tags", ANALYTICS, unit="signals/week",
    ),
    MetricDefinition(
        "view_depth_per_session", 3.4, "number",
        "Average pages viewed per session for this startup", ANALYTICS, unit="pages/session",
    ),
)


class MetricCatalog:
    """Lookup over the metric definitions, stamped with the request time."""

    def __init__(
        self,
        definitions: tuple[MetricDefinition, ...] = METRIC_DEFINITIONS,
        *,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._definitions = {definition.metric: definition for definition in definitions}
        self._now = now

    def names(self) -> list[str]:
        return list(self._definitions)

    def get(self, name: str) -> Metric | None:
        definition = self._definitions.get(name)
        if definition is None:
            return None
        now = self._now()
        return Metric(
            metric=definition.metric,
            value=definition.resolve(now),
            type=definition.type,
            unit=definition.unit,
            range=definition.range,
            description=definition.description,
            timestamp=now,
            source=definition.source,
            provenance=definition.provenance,
        )

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


_CATALOG = MetricCatalog()


def get_metric_catalog() -> MetricCatalog:
    return _CATALOG
