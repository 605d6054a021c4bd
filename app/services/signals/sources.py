"""Signal sources: one adapter per upstream behind a common fetch contract."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from app.clients.errors import UpstreamError, UpstreamNotConfiguredError, UpstreamNotFoundError
from app.clients.github import GitHubClient
from app.clients.producthunt import ProductHuntClient
from app.clients.result import FetchResult
from app.models.startup_signal import TrackedStartup
from app.models.upstream import GitHubRepo, ProductHuntPost
from app.services.scoring import formulas

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceEnrichment:
    """Live values one source contributed to a startup signal."""

    source: str
    novelty_score: float | None = None
    cloneability_score: float | None = None
    github_stars: int | None = None
    last_activity_at: datetime | None = None
    metrics: dict[str, float] = field(default_factory=dict)


class SignalSource(Protocol):
    """Anything that can enrich a tracked startup from one upstream."""

    name: str

    async def fetch(self, entity: TrackedStartup) -> FetchResult[SourceEnrichment]:
        ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


class GitHubSignalSource:
    """Derives novelty, cloneability and activity metrics from a founder's repos."""

    name = "github"

    def __init__(self, client: GitHubClient, *, now: Callable[[], datetime] = _utcnow) -> None:
        self._client = client
        self._now = now

    async def fetch(self, entity: TrackedStartup) -> FetchResult[SourceEnrichment]:
        username = entity.github_username
        if not username:
            return FetchResult.failure(
                UpstreamNotConfiguredError(self.name, f"No GitHub username configured for {entity.name}")
            )
        repos_result = await self._client.get_user_repos(username)
        if not repos_result.ok:
            return FetchResult.failure(repos_result.error)
        repos = repos_result.value_or([])
        if not repos:
            return FetchResult.failure(UpstreamNotFoundError(self.name, f"{username} has no public repositories"))

        now = self._now()
        top_repo = formulas.top_starred_repo(repos)
        owner, repo_name = _split_full_name(top_repo, username)
        commits_result = await self._client.get_repo_commits(
            owner,
            repo_name,
            since=now - timedelta(weeks=formulas.COMMIT_WINDOW_WEEKS),
        )
        commits = commits_result.value_or([])
        if not commits_result.ok:
            logger.info(
                "signals.github.commits_unavailable",
                extra={"entity_id": entity.id, "repo": top_repo.full_name, "code": commits_result.error_code},
            )

        metrics = {
            "github_activity_level": float(formulas.calculate_activity_level(repos, commits, now=now)),
            "repo_ownership_score": float(formulas.calculate_repo_ownership_score(repos)),
            "weekly_commit_frequency": formulas.calculate_weekly_commit_frequency(commits, now=now),
            "github_stars_count": float(top_repo.stargazers_count),
            "repo_forks_count": float(sum(repo.forks_count for repo in repos)),
            "freshness_score": float(
                formulas.calculate_freshness_score(
                    top_repo.created_at,
                    top_repo.pushed_at or top_repo.updated_at,
                    now=now,
                )
            ),
        }
        return FetchResult.success(
            SourceEnrichment(
                source=self.name,
                novelty_score=formulas.estimate_novelty(repos, now=now),
                cloneability_score=float(formulas.estimate_cloneability(repos)),
                github_stars=sum(repo.stargazers_count for repo in repos),
                last_activity_at=max(repo.pushed_at or repo.updated_at for repo in repos),
                metrics=metrics,
            )
        )


class ProductHuntSignalSource:
    """Derives originality and launch freshness from the startup's Product Hunt post."""

    name = "producthunt"

    def __init__(self, client: ProductHuntClient, *, now: Callable[[], datetime] = _utcnow) -> None:
        self._client = client
        self._now = now

    async def fetch(self, entity: TrackedStartup) -> FetchResult[SourceEnrichment]:
        slug = entity.product_hunt_slug
        if not slug:
            return FetchResult.failure(
                UpstreamNotConfiguredError(self.name, f"No Product Hunt slug configured for {entity.name}")
            )
        posts_result = await self._client.search_posts(entity.name)
        if not posts_result.ok:
            return FetchResult.failure(posts_result.error)
        post = _pick_post(posts_result.value_or([]), slug)
        if post is None:
            return FetchResult.failure(UpstreamNotFoundError(self.name, f"No Product Hunt launch found for {slug}"))

        originality = formulas.calculate_originality_score(
            post.description or post.tagline,
            post.topic_names,
        )
        freshness = formulas.calculate_freshness_score(
            post.created_at,
            post.featured_at or post.created_at,
            now=self._now(),
        )
        return FetchResult.success(
            SourceEnrichment(
                source=self.name,
                novelty_score=round(originality / 10, 1),
                last_activity_at=post.featured_at or post.created_at,
                metrics={
                    "originality_score": float(originality),
                    "producthunt_upvotes": float(post.votes_count),
                    "launch_freshness_score": float(freshness),
                },
            )
        )


class StaticSignalSource:
    """Returns a preset enrichment or error without touching the network."""

    def __init__(
        self,
        name: str,
        *,
        enrichment: SourceEnrichment | None = None,
        error: UpstreamError | None = None,
    ) -> None:
        self.name = name
        self._enrichment = enrichment
        self._error = error
        self.calls = 0

    async def fetch(self, entity: TrackedStartup) -> FetchResult[SourceEnrichment]:
        self.calls += 1
        if self._error is not None:
            return FetchResult.failure(self._error)
        if self._enrichment is None:
            return FetchResult.failure(UpstreamNotConfiguredError(self.name))
        return FetchResult.success(self._enrichment)


def _split_full_name(repo: GitHubRepo, fallback_owner: str) -> tuple[str, str]:
    owner, _, name = repo.full_name.partition("/")
    if not name:
        return fallback_owner, repo.name
    return owner, name


def _pick_post(posts: list[ProductHuntPost], slug: str) -> ProductHuntPost | None:
    if not posts:
        return None
    normalized = slug.lower()
    for post in posts:
        if post.slug and post.slug.lower() == normalized:
            return post
    return max(posts, key=lambda post: post.votes_count)
