"""Composes startup signals from upstream sources with placeholder fallback."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from app.clients.errors import UpstreamError
from app.clients.github import GitHubClient
from app.clients.producthunt import ProductHuntClient
from app.clients.result import FetchResult
from app.config import Settings, settings
from app.models.startup_signal import StartupSignal, TrackedStartup, TractionSignals
from app.observability.metrics import metrics
from app.services.signals.cache import SignalCache
from app.services.signals.catalog import TRACKED_STARTUPS
from app.services.signals.sources import (
    GitHubSignalSource,
    ProductHuntSignalSource,
    SignalSource,
    SourceEnrichment,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceholderRanges:
    """Inclusive bounds for values synthesized when no live data is available."""

    novelty: tuple[int, int] = (6, 9)
    fallback_novelty: tuple[int, int] = (5, 9)
    cloneability: tuple[int, int] = (1, 8)
    india_market_fit: tuple[int, int] = (5, 9)
    github_stars: tuple[int, int] = (100, 2000)
    twitter_followers: tuple[int, int] = (500, 10000)
    substack_posts: tuple[int, int] = (3, 20)
    minutes_ago: tuple[int, int] = (1, 60)


@dataclass(frozen=True)
class AggregatorConfig:
    """Configuration bundle for the signal aggregation service."""

    entities: tuple[TrackedStartup, ...] = TRACKED_STARTUPS
    cache_ttl_seconds: float = 300.0
    placeholders: PlaceholderRanges = field(default_factory=PlaceholderRanges)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SignalAggregationService:
    """Serves one StartupSignal per tracked entity, live where upstreams allow.

    Lookups go through a per-entity TTL cache. On a miss every source is queried
    concurrently; fields a source could not supply fall back to placeholders.
    The service never raises to callers: if composing a signal fails outright,
    an uncached fallback signal is returned instead.
    """

    def __init__(
        self,
        config: AggregatorConfig | None = None,
        *,
        sources: Sequence[SignalSource] = (),
        cache: SignalCache | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config or AggregatorConfig()
        self._sources = tuple(sources)
        self._cache = cache or SignalCache(ttl_seconds=self._config.cache_ttl_seconds, clock=clock)
        self._rng = rng or random.Random()
        self._now = now
        self._entities = {entity.id: entity for entity in self._config.entities}

    @property
    def cache(self) -> SignalCache:
        return self._cache

    @property
    def entity_ids(self) -> list[int]:
        return list(self._entities)

    async def get_startup_signals(self) -> list[StartupSignal]:
        """Return a signal for every tracked entity, in catalogue order."""
        return list(await asyncio.gather(*(self._resolve(entity) for entity in self._config.entities)))

    async def get_startup_by_id(self, entity_id: int) -> StartupSignal | None:
        entity = self._entities.get(entity_id)
        if entity is None:
            return None
        return await self._resolve(entity)

    async def refresh_startup_data(self, entity_id: int) -> StartupSignal | None:
        """Drop the cached signal for ``entity_id`` and recompute it."""
        self._cache.invalidate(entity_id)
        return await self.get_startup_by_id(entity_id)

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("signals.cache.cleared")

    def get_cache_status(self) -> dict[str, int]:
        return {"cached": self._cache.valid_count(), "total": len(self._entities)}

    async def aclose(self) -> None:
        for source in self._sources:
            closer = getattr(source, "aclose", None)
            if closer is not None:
                await closer()

    async def _resolve(self, entity: TrackedStartup) -> StartupSignal:
        try:
            return await self._enhanced_signal(entity)
        except Exception:
            logger.exception(
                "signals.compose_failed",
                extra={"entity_id": entity.id, "entity_name": entity.name},
            )
            metrics.increment("signals.fallback_used", tags={"entity_id": entity.id})
            return self._fallback_signal(entity)

    async def _enhanced_signal(self, entity: TrackedStartup) -> StartupSignal:
        cached = self._cache.get(entity.id)
        if cached is not None:
            metrics.increment("signals.cache_hit", tags={"entity_id": entity.id})
            logger.debug("signals.cache.hit", extra={"entity_id": entity.id})
            return cached

        metrics.increment("signals.cache_miss", tags={"entity_id": entity.id})
        start = time.perf_counter()
        results = await asyncio.gather(*(self._fetch(source, entity) for source in self._sources))
        enrichments: list[SourceEnrichment] = []
        for source, result in zip(self._sources, results):
            if result.ok and result.value is not None:
                enrichments.append(result.value)
            else:
                self._record_degradation(entity, source.name, result)

        signal = self._compose(entity, enrichments)
        self._cache.set(entity.id, signal)
        elapsed_ms = (time.perf_counter() - start) * 1000
        metrics.timing(
            "signals.latency_ms",
            elapsed_ms,
            tags={"entity_id": entity.id, "live": signal.real_time_data},
        )
        logger.info(
            "signals.composed",
            extra={
                "entity_id": entity.id,
                "live_sources": [enrichment.source for enrichment in enrichments],
                "real_time_data": signal.real_time_data,
            },
        )
        return signal

    def _compose(self, entity: TrackedStartup, enrichments: Sequence[SourceEnrichment]) -> StartupSignal:
        ranges = self._config.placeholders
        novelty = _first(enrichment.novelty_score for enrichment in enrichments)
        cloneability = _first(enrichment.cloneability_score for enrichment in enrichments)
        stars = _first(enrichment.github_stars for enrichment in enrichments)
        activity = [enrichment.last_activity_at for enrichment in enrichments if enrichment.last_activity_at]

        derived: dict[str, float] = {}
        for enrichment in enrichments:
            for name, value in enrichment.metrics.items():
                derived.setdefault(name, value)

        if activity:
            last_updated = _time_ago(self._now() - max(activity))
        else:
            last_updated = self._placeholder_time_ago()

        return StartupSignal(
            id=entity.id,
            name=entity.name,
            pitch=entity.pitch,
            novelty_score=novelty if novelty is not None else self._randint(ranges.novelty),
            cloneability_score=(
                cloneability if cloneability is not None else self._randint(ranges.cloneability)
            ),
            india_market_fit=self._india_market_fit(entity),
            estimated_build_cost=entity.estimated_build_cost,
            industry=entity.industry,
            region=entity.region,
            source=entity.source,
            team=entity.team,
            founder_background=entity.founder_background,
            traction_signals=TractionSignals(
                github_stars=stars if stars is not None else self._randint(ranges.github_stars),
                twitter_followers=self._randint(ranges.twitter_followers),
                substack_posts=self._randint(ranges.substack_posts),
            ),
            action_tag=entity.action_tag,
            last_updated=last_updated,
            github_username=entity.github_username,
            product_hunt_slug=entity.product_hunt_slug,
            website_url=entity.website_url,
            real_time_data=bool(enrichments),
            derived_metrics=derived,
        )

    def _fallback_signal(self, entity: TrackedStartup) -> StartupSignal:
        ranges = self._config.placeholders
        return StartupSignal(
            id=entity.id,
            name=entity.name,
            pitch=entity.pitch,
            novelty_score=self._randint(ranges.fallback_novelty),
            cloneability_score=self._randint(ranges.cloneability),
            india_market_fit=self._india_market_fit(entity),
            estimated_build_cost=entity.estimated_build_cost,
            industry=entity.industry,
            region=entity.region,
            source=entity.source,
            team=entity.team,
            founder_background=entity.founder_background,
            traction_signals=TractionSignals(
                github_stars=self._randint(ranges.github_stars),
                twitter_followers=self._randint(ranges.twitter_followers),
                substack_posts=self._randint(ranges.substack_posts),
            ),
            action_tag=entity.action_tag,
            last_updated=self._placeholder_time_ago(),
            real_time_data=False,
        )

    async def _fetch(self, source: SignalSource, entity: TrackedStartup) -> FetchResult[SourceEnrichment]:
        """A source that raises only loses its own enrichment."""
        try:
            return await source.fetch(entity)
        except Exception as exc:
            logger.exception(
                "signals.source_raised",
                extra={"entity_id": entity.id, "source": source.name, "error": type(exc).__name__},
            )
            return FetchResult.failure(
                UpstreamError(
                    f"{source.name} source raised {type(exc).__name__}: {exc}",
                    f"{source.name.upper()}_ERROR",
                    source=source.name,
                )
            )

    def _record_degradation(
        self,
        entity: TrackedStartup,
        source_name: str,
        result: FetchResult[SourceEnrichment],
    ) -> None:
        code = result.error_code or "EMPTY_RESULT"
        metrics.increment(
            "signals.enrichment_failed",
            tags={"source": source_name, "code": code},
        )
        logger.warning(
            "signals.enrichment_degraded",
            extra={
                "entity_id": entity.id,
                "source": source_name,
                "code": code,
                "error": str(result.error) if result.error else None,
            },
        )

    def _india_market_fit(self, entity: TrackedStartup) -> int:
        if entity.india_market_fit is not None:
            return entity.india_market_fit
        return self._randint(self._config.placeholders.india_market_fit)

    def _placeholder_time_ago(self) -> str:
        return f"{self._randint(self._config.placeholders.minutes_ago)} min ago"

    def _randint(self, bounds: tuple[int, int]) -> int:
        low, high = bounds
        return self._rng.randint(low, high)


def _first(values):
    for value in values:
        if value is not None:
            return value
    return None


def _time_ago(delta: timedelta) -> str:
    minutes = max(int(delta.total_seconds() // 60), 1)
    if minutes < 60:
        return f"{minutes} min ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hours ago" if hours > 1 else "1 hour ago"
    days = hours // 24
    return f"{days} days ago" if days > 1 else "1 day ago"


def build_signal_service(
    app_settings: Settings,
    *,
    entities: Sequence[TrackedStartup] | None = None,
    rng: random.Random | None = None,
) -> SignalAggregationService:
    """Wire the aggregation service from explicit settings."""
    status: Mapping[str, bool] = app_settings.integration_status()
    logger.info("signals.integrations", extra={"integrations": dict(status)})
    sources: list[SignalSource] = [
        GitHubSignalSource(GitHubClient.from_settings(app_settings)),
        ProductHuntSignalSource(ProductHuntClient.from_settings(app_settings)),
    ]
    config = AggregatorConfig(
        entities=tuple(entities) if entities is not None else TRACKED_STARTUPS,
        cache_ttl_seconds=float(app_settings.signal_cache_ttl_seconds),
    )
    return SignalAggregationService(config, sources=sources, rng=rng)


_SERVICE_INSTANCE: SignalAggregationService | None = None


def get_signal_service() -> SignalAggregationService:
    """Process-wide accessor used by API routes."""
    global _SERVICE_INSTANCE  # noqa: PLW0603
    if _SERVICE_INSTANCE is None:
        _SERVICE_INSTANCE = build_signal_service(settings)
    return _SERVICE_INSTANCE


async def shutdown_signal_service() -> None:
    global _SERVICE_INSTANCE  # noqa: PLW0603
    if _SERVICE_INSTANCE is not None:
        await _SERVICE_INSTANCE.aclose()
        _SERVICE_INSTANCE = None
