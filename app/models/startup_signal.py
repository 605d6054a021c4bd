"""Domain models for tracked startups and their composed signals."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ActionTag(str, Enum):
    """Routing classification shown on the dashboard."""

    BUILD = "Build"
    SCOUT = "Scout"
    STORE = "Store"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TractionSignals(_CamelModel):
    github_stars: int = Field(ge=0)
    twitter_followers: int = Field(ge=0)
    substack_posts: int = Field(ge=0)


class TrackedStartup(BaseModel):
    """Static configuration for an entity the terminal keeps scoring."""

    id: int
    name: str
    pitch: str
    industry: str
    region: str
    source: str
    team: str
    founder_background: str
    action_tag: ActionTag
    estimated_build_cost: int = Field(ge=0)
    india_market_fit: int | None = Field(default=None, ge=0, le=10)
    github_username: str | None = None
    product_hunt_slug: str | None = None
    website_url: str | None = None


class StartupSignal(_CamelModel):
    """Composed view of a tracked startup, live where upstreams allowed it."""

    id: int
    name: str
    pitch: str
    novelty_score: float = Field(ge=0, le=10)
    cloneability_score: float = Field(ge=0, le=10)
    india_market_fit: int = Field(ge=0, le=10)
    estimated_build_cost: int = Field(ge=0)
    industry: str
    region: str
    source: str
    team: str
    founder_background: str
    traction_signals: TractionSignals
    action_tag: ActionTag
    last_updated: str
    github_username: str | None = None
    product_hunt_slug: str | None = None
    website_url: str | None = None
    real_time_data: bool = False
    derived_metrics: dict[str, float] = Field(
        default_factory=dict,
        description="Formula-library outputs for sources that answered live.",
    )
