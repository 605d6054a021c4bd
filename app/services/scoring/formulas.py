"""Derived-metric formulas over already-fetched upstream data.

Every function here is pure and total: inputs outside the expected range are
clamped rather than rejected, and nothing raises. Time-dependent formulas take
an optional ``now`` so callers (and tests) can pin the evaluation time.
"""

from __future__ import annotations

import calendar
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from app.models.upstream import GitHubCommit, GitHubRepo

ACTIVITY_CEILING = 1000
ACTIVE_REPO_MONTHS = 3
ACTIVE_REPO_WEIGHT = 10
COMMIT_WINDOW_WEEKS = 8

GENERIC_BUSINESS_WORDS = frozenset({"app", "platform", "software", "tool", "service", "system"})
MAX_RARE_TAGS = 5

NOVELTY_CAP = 10.0
NOVELTY_RECENT_DAYS = 30
NOVELTY_RECENT_BONUS = 2.0
NOVELTY_LANGUAGE_POINTS = 1.0
NOVELTY_MAX_LANGUAGES = 5
NOVELTY_TOPIC_POINTS = 0.3
NOVELTY_MAX_TOPICS = 10

COMPLEX_LANGUAGES = frozenset(
    {"c", "c++", "rust", "haskell", "scala", "assembly", "cuda", "verilog", "vhdl", "erlang", "ocaml"}
)
CLONEABILITY_START = 8
CLONEABILITY_FLOOR = 1
POPULAR_REPO_STARS = 1000
PROLIFIC_REPO_COUNT = 10


def calculate_activity_level(
    repos: Sequence[GitHubRepo],
    commits: Sequence[GitHubCommit],
    *,
    now: datetime | None = None,
) -> int:
    """Commit count plus ten points per repo updated in the last three months, capped at 1000."""
    cutoff = _months_before(_resolve_now(now), ACTIVE_REPO_MONTHS)
    active_repos = sum(1 for repo in repos if _as_utc(repo.updated_at) > cutoff)
    return min(len(commits) + active_repos * ACTIVE_REPO_WEIGHT, ACTIVITY_CEILING)


def calculate_repo_ownership_score(repos: Sequence[GitHubRepo]) -> int:
    """Count repos whose full name carries no namespace separator.

    This is a weak proxy for "owned" versus forked or organisation repos: GitHub
    full names normally include the owner, so most real payloads score 0.
    """
    return sum(1 for repo in repos if "/" not in repo.full_name)


def calculate_weekly_commit_frequency(
    commits: Sequence[GitHubCommit],
    *,
    now: datetime | None = None,
) -> float:
    """Average commits per week over the trailing eight weeks."""
    if not commits:
        return 0.0
    cutoff = _resolve_now(now) - timedelta(weeks=COMMIT_WINDOW_WEEKS)
    recent = sum(1 for commit in commits if _as_utc(commit.authored_at) > cutoff)
    return recent / COMMIT_WINDOW_WEEKS


def calculate_originality_score(description: str, tags: Sequence[str]) -> int:
    """Keyword-uniqueness score in [0, 100]; fewer tags read as rarer.

    A blank description has no words to judge, so its uniqueness ratio is 0
    rather than full credit. With no tags either, the score is 15.
    """
    words = (description or "").lower().split()
    if words:
        kept = [word for word in words if word not in GENERIC_BUSINESS_WORDS]
        uniqueness_ratio = len(kept) / len(words)
    else:
        uniqueness_ratio = 0.0
    if tags:
        tag_rarity = (MAX_RARE_TAGS - min(len(tags), MAX_RARE_TAGS)) / MAX_RARE_TAGS
    else:
        tag_rarity = 0.5
    return _clamp(round((uniqueness_ratio * 0.7 + tag_rarity * 0.3) * 100), 0, 100)


def calculate_replicability_score(tech_complexity: float, team_size: int, has_patents: bool) -> int:
    """Ease of replication in [0, 100]. Lower means a stronger moat."""
    score = 50.0
    score -= max(tech_complexity, 0) * 10
    score -= min(max(team_size, 0) * 5, 25)
    if has_patents:
        score -= 15
    return int(_clamp(round(score), 0, 100))


def calculate_freshness_score(
    created_at: datetime,
    last_update: datetime,
    *,
    now: datetime | None = None,
) -> int:
    """Recency score in [0, 100]; the last update weighs 70%, creation 30%."""
    reference = _resolve_now(now)
    days_since_creation = (reference - _as_utc(created_at)).total_seconds() / 86400
    days_since_update = (reference - _as_utc(last_update)).total_seconds() / 86400
    creation_score = max(0.0, 100 - days_since_creation / 3)
    update_score = max(0.0, 100 - days_since_update)
    return _clamp(round(creation_score * 0.3 + update_score * 0.7), 0, 100)


def estimate_novelty(repos: Sequence[GitHubRepo], *, now: datetime | None = None) -> float:
    """Novelty on a 0-10 scale from language and topic diversity plus recent pushes."""
    languages = {repo.language.lower() for repo in repos if repo.language}
    topics = {topic.lower() for repo in repos for topic in repo.topics}
    score = min(len(languages), NOVELTY_MAX_LANGUAGES) * NOVELTY_LANGUAGE_POINTS
    score += min(len(topics), NOVELTY_MAX_TOPICS) * NOVELTY_TOPIC_POINTS
    cutoff = _resolve_now(now) - timedelta(days=NOVELTY_RECENT_DAYS)
    if any(_as_utc(repo.pushed_at or repo.updated_at) > cutoff for repo in repos):
        score += NOVELTY_RECENT_BONUS
    return min(round(score, 1), NOVELTY_CAP)


def estimate_cloneability(repos: Sequence[GitHubRepo]) -> int:
    """Cloneability on a 1-10 scale; complex stacks and traction make cloning harder."""
    score = CLONEABILITY_START
    if any(repo.language and repo.language.lower() in COMPLEX_LANGUAGES for repo in repos):
        score -= 3
    top_repo = top_starred_repo(repos)
    if top_repo is not None and top_repo.stargazers_count > POPULAR_REPO_STARS:
        score -= 2
    if len(repos) > PROLIFIC_REPO_COUNT:
        score -= 1
    return max(score, CLONEABILITY_FLOOR)


def top_starred_repo(repos: Sequence[GitHubRepo]) -> GitHubRepo | None:
    if not repos:
        return None
    return max(repos, key=lambda repo: repo.stargazers_count)


def _months_before(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 - months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _resolve_now(now: datetime | None) -> datetime:
    return _as_utc(now) if now is not None else datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _clamp(value: float, lower: float, upper: float):
    return max(lower, min(upper, value))
