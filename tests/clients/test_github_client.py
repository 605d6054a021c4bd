from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest

from app.clients.github import GitHubClient
from tests.helpers.factories import commit_payload, repo_payload


def _client(handler, token: str | None = "gh-token") -> GitHubClient:
    transport = httpx.MockTransport(handler)
    http_client = httpx.AsyncClient(transport=transport, base_url="https://api.github.com")
    return GitHubClient(token, http_client=http_client)


@pytest.mark.asyncio
async def test_get_user_repos_sends_auth_and_parses_payload():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[repo_payload(), repo_payload(id=2, name="other", full_name="octocat/other")])

    client = _client(handler)
    result = await client.get_user_repos("octocat")

    assert result.ok
    assert [repo.name for repo in result.value] == ["hello", "other"]
    request = seen[0]
    assert request.url.path == "/users/octocat/repos"
    assert request.url.params["sort"] == "updated"
    assert request.url.params["per_page"] == "100"
    assert request.headers["Authorization"] == "Bearer gh-token"
    assert request.headers["Accept"] == "application/vnd.github.v3+json"
    assert request.headers["User-Agent"] == "MVP90-Terminal/1.0"


@pytest.mark.asyncio
async def test_missing_token_fails_without_network():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not be called
        raise AssertionError("network call attempted without a token")

    client = _client(handler, token=None)
    result = await client.get_user_repos("octocat")

    assert not result.ok
    assert result.error_code == "NOT_CONFIGURED"
    assert client.configured is False


@pytest.mark.asyncio
async def test_commits_since_is_sent_in_utc_zulu_form():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[commit_payload("abc", "2025-06-01T10:00:00Z")])

    client = _client(handler)
    result = await client.get_repo_commits("octocat", "hello", since=datetime(2025, 4, 20, 12, 0, 30, 999, tzinfo=UTC))

    assert result.ok
    assert result.value[0].authored_at == datetime(2025, 6, 1, 10, 0, tzinfo=UTC)
    assert seen[0].url.path == "/repos/octocat/hello/commits"
    assert seen[0].url.params["since"] == "2025-04-20T12:00:30Z"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("response", "expected_code"),
    [
        (httpx.Response(429), "GITHUB_429"),
        (httpx.Response(403, text='{"message": "API rate limit exceeded"}'), "GITHUB_429"),
        (httpx.Response(404, json={"message": "Not Found"}), "GITHUB_NOT_FOUND"),
        (httpx.Response(504), "GITHUB_TIMEOUT"),
        (httpx.Response(500, json={"message": "Server Error"}), "GITHUB_ERROR"),
        (httpx.Response(200, content=b"not json"), "GITHUB_SCHEMA_ERR"),
        (httpx.Response(200, json={"unexpected": "object"}), "GITHUB_SCHEMA_ERR"),
    ],
)
async def test_failures_are_mapped_to_error_codes(response, expected_code):
    client = _client(lambda request: response)

    result = await client.get_user_repos("octocat")

    assert not result.ok
    assert result.error_code == expected_code
    assert result.value_or([]) == []


@pytest.mark.asyncio
async def test_transport_timeout_becomes_timeout_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow upstream", request=request)

    result = await _client(handler).get_user("octocat")

    assert result.error_code == "GITHUB_TIMEOUT"


@pytest.mark.asyncio
async def test_get_repo_issues_requests_every_state():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"number": 1, "state": "open"}, {"number": 2, "state": "closed"}])

    result = await _client(handler).get_repo_issues("octocat", "hello")

    assert len(result.value) == 2
    assert seen[0].url.params["state"] == "all"


@pytest.mark.asyncio
async def test_get_user_parses_profile():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"id": 1, "login": "octocat", "followers": 20, "created_at": "2011-01-25T18:44:36Z"},
        )

    async with _client(handler) as client:
        result = await client.get_user("octocat")

    assert result.value.login == "octocat"
    assert result.value.followers == 20
