"""Client for the GitHub REST API (v3)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from app.clients.errors import (
    UpstreamError,
    UpstreamNotConfiguredError,
    UpstreamNotFoundError,
    UpstreamRateLimitError,
    UpstreamSchemaError,
    UpstreamTimeoutError,
)
from app.clients.result import FetchResult
from app.config import Settings
from app.models.upstream import GitHubCommit, GitHubRepo, GitHubUser

logger = logging.getLogger(__name__)

SOURCE = "github"
USER_AGENT = "MVP90-Terminal/1.0"

_M = TypeVar("_M", bound=BaseModel)
_T = TypeVar("_T")


class GitHubClient:
    """Async GitHub client; every public call returns a FetchResult."""

    def __init__(
        self,
        token: str | None,
        *,
        base_url: str = "https://api.github.com",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._token = token or ""
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> GitHubClient:
        return cls(
            settings.github_token,
            base_url=settings.github_api_url,
            timeout=settings.upstream_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self._token)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._owns_http_client:
            await self._http.aclose()

    async def get_user_repos(self, username: str) -> FetchResult[list[GitHubRepo]]:
        """Fetch a single page of the user's repositories, most recently updated first."""

        async def _call() -> list[GitHubRepo]:
            payload = await self._get(
                f"/users/{quote(username, safe='')}/repos",
                {"sort": "updated", "per_page": 100},
            )
            return _parse_list(payload, GitHubRepo)

        return await self._guarded("repos", _call, username=username)

    async def get_user(self, username: str) -> FetchResult[GitHubUser]:
        async def _call() -> GitHubUser:
            payload = await self._get(f"/users/{quote(username, safe='')}")
            return _parse_one(payload, GitHubUser)

        return await self._guarded("user", _call, username=username)

    async def get_repo_commits(
        self,
        owner: str,
        repo: str,
        since: datetime | None = None,
    ) -> FetchResult[list[GitHubCommit]]:
        """Fetch commit history, optionally limited to commits after ``since``."""
        params: dict[str, Any] = {"per_page": 100}
        if since is not None:
            params["since"] = _isoformat(since)

        async def _call() -> list[GitHubCommit]:
            payload = await self._get(f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/commits", params)
            return _parse_list(payload, GitHubCommit)

        return await self._guarded("commits", _call, username=owner)

    async def get_repo_issues(self, owner: str, repo: str) -> FetchResult[list[dict[str, Any]]]:
        """Fetch issues in every state."""

        async def _call() -> list[dict[str, Any]]:
            payload = await self._get(
                f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/issues",
                {"state": "all", "per_page": 100},
            )
            if not isinstance(payload, list) or not all(isinstance(entry, dict) for entry in payload):
                raise UpstreamSchemaError(SOURCE, "Issues payload must be a list of objects.")
            return payload

        return await self._guarded("issues", _call, username=owner)

    async def _guarded(
        self,
        operation: str,
        call: Callable[[], Awaitable[_T]],
        *,
        username: str,
    ) -> FetchResult[_T]:
        if not self._token:
            return FetchResult.failure(UpstreamNotConfiguredError(SOURCE, "GitHub token not configured"))
        try:
            return FetchResult.success(await call())
        except UpstreamError as exc:
            logger.warning(
                "github.request_failed",
                extra={"operation": operation, "username": username, "code": exc.code},
            )
            return FetchResult.failure(exc)

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        try:
            response = await self._http.get(path, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(SOURCE) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"HTTP error calling GitHub: {exc}", "GITHUB_ERROR", source=SOURCE) from exc

        if response.status_code == 429 or (
            response.status_code == 403 and "rate limit" in response.text.lower()
        ):
            raise UpstreamRateLimitError(SOURCE)
        if response.status_code in (408, 504):
            raise UpstreamTimeoutError(SOURCE)
        if response.status_code == 404:
            raise UpstreamNotFoundError(SOURCE, f"GitHub resource not found: {path}")
        if response.status_code >= 400:
            detail = response.text[:200]
            try:
                detail = response.json().get("message") or detail
            except (ValueError, AttributeError):
                pass
            raise UpstreamError(
                f"GitHub API error: {response.status_code} - {detail}",
                "GITHUB_ERROR",
                source=SOURCE,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamSchemaError(SOURCE, "Failed to decode GitHub response JSON.") from exc

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _parse_list(payload: Any, model: type[_M]) -> list[_M]:
    if not isinstance(payload, list):
        raise UpstreamSchemaError(SOURCE, f"Expected a list of {model.__name__} objects.")
    try:
        return [model.model_validate(entry) for entry in payload]
    except ValidationError as exc:
        raise UpstreamSchemaError(SOURCE, f"Invalid {model.__name__} payload: {exc.error_count()} errors") from exc


def _parse_one(payload: Any, model: type[_M]) -> _M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise UpstreamSchemaError(SOURCE, f"Invalid {model.__name__} payload: {exc.error_count()} errors") from exc


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
