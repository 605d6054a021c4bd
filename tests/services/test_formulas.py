from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from app.services.scoring import formulas
from tests.helpers.factories import NOW, make_commit, make_repo


def test_activity_level_counts_commits_and_recently_updated_repos():
    repos = [
        make_repo(id=1, updated_at="2025-05-01T00:00:00Z"),
        make_repo(id=2, updated_at="2024-12-01T00:00:00Z"),
    ]
    commits = [make_commit(str(index), NOW - timedelta(days=index)) for index in range(5)]

    assert formulas.calculate_activity_level(repos, commits, now=NOW) == 15


def test_activity_level_is_capped():
    repos = [make_repo(updated_at="2025-06-01T00:00:00Z")]
    commits = [make_commit(str(index), NOW) for index in range(995)]

    assert formulas.calculate_activity_level(repos, commits, now=NOW) == formulas.ACTIVITY_CEILING


def test_activity_level_uses_calendar_months():
    end_of_may = datetime(2025, 5, 31, tzinfo=UTC)
    repos = [make_repo(updated_at="2025-03-01T00:00:00Z")]

    assert formulas.calculate_activity_level(repos, [], now=end_of_may) == 10


def test_activity_level_empty_inputs():
    assert formulas.calculate_activity_level([], [], now=NOW) == 0


def test_repo_ownership_counts_names_without_namespace():
    repos = [
        make_repo(full_name="octocat/hello"),
        make_repo(full_name="standalone"),
    ]

    assert formulas.calculate_repo_ownership_score(repos) == 1
    assert formulas.calculate_repo_ownership_score([]) == 0


def test_weekly_commit_frequency_over_eight_weeks():
    recent = [make_commit(f"r{index}", NOW - timedelta(days=index)) for index in range(8)]
    stale = [make_commit(f"s{index}", NOW - timedelta(weeks=10 + index)) for index in range(4)]

    assert formulas.calculate_weekly_commit_frequency(recent + stale, now=NOW) == 1.0
    assert formulas.calculate_weekly_commit_frequency([], now=NOW) == 0.0


@pytest.mark.parametrize(
    ("description", "tags", "expected"),
    [
        ("neural interface app", ["ai", "hardware"], 65),
        ("", [], 15),
        ("app platform", ["a", "b", "c", "d", "e", "f"], 0),
        ("soil sensors for smallholder farms", ["Agriculture", "IoT"], 88),
    ],
)
def test_originality_score(description, tags, expected):
    score = formulas.calculate_originality_score(description, tags)

    assert score == expected
    assert 0 <= score <= 100


@pytest.mark.parametrize(
    ("complexity", "team_size", "has_patents", "expected"),
    [
        (2.0, 3, True, 0),
        (0.0, 0, False, 50),
        (1.0, 10, False, 15),
        (5.0, 10, True, 0),
        (10, 10, True, 0),
    ],
)
def test_replicability_score(complexity, team_size, has_patents, expected):
    assert formulas.calculate_replicability_score(complexity, team_size, has_patents) == expected


def test_freshness_score_bounds():
    assert formulas.calculate_freshness_score(NOW, NOW, now=NOW) == 100
    assert (
        formulas.calculate_freshness_score(NOW - timedelta(days=300), NOW - timedelta(days=100), now=NOW)
        == 0
    )


def test_freshness_score_weights_update_over_creation():
    score = formulas.calculate_freshness_score(
        NOW - timedelta(days=30),
        NOW - timedelta(days=10),
        now=NOW,
    )

    assert score == 90


def test_freshness_score_accepts_naive_datetimes():
    naive_now = NOW.replace(tzinfo=None)

    assert formulas.calculate_freshness_score(naive_now, naive_now, now=NOW) == 100


def test_estimate_novelty_rewards_diversity_and_recent_pushes():
    repos = [
        make_repo(id=1, language="Python", topics=["ai", "ml"], pushed_at="2025-06-10T00:00:00Z"),
        make_repo(id=2, language="Rust", topics=["ai"], pushed_at="2023-01-01T00:00:00Z"),
        make_repo(id=3, language="python", topics=[]),
    ]

    assert formulas.estimate_novelty(repos, now=NOW) == 4.6


def test_estimate_novelty_is_capped():
    repos = [
        make_repo(id=index, language=f"lang-{index}", topics=[f"t{index}a", f"t{index}b"])
        for index in range(6)
    ]

    assert formulas.estimate_novelty(repos, now=NOW) == formulas.NOVELTY_CAP


def test_estimate_cloneability():
    assert formulas.estimate_cloneability([make_repo(stargazers_count=50)]) == 8

    repos = [make_repo(id=index, language="Python") for index in range(10)]
    repos.append(make_repo(id=99, language="Rust", stargazers_count=1500))

    assert formulas.estimate_cloneability(repos) == 2


def test_top_starred_repo():
    low = make_repo(id=1, stargazers_count=3)
    high = make_repo(id=2, stargazers_count=30)

    assert formulas.top_starred_repo([low, high]) is high
    assert formulas.top_starred_repo([]) is None
