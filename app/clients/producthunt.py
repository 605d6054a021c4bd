"""Client for the Product Hunt GraphQL API (v2)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from app.clients.errors import (
    UpstreamError,
    UpstreamNotConfiguredError,
    UpstreamRateLimitError,
    UpstreamSchemaError,
    UpstreamTimeoutError,
)
from app.clients.result import FetchResult
from app.config import Settings
from app.models.upstream import ProductHuntPost

logger = logging.getLogger(__name__)

SOURCE = "producthunt"

_T = TypeVar("_T")

_POST_FIELDS = """
    id
    name
    slug
    tagline
    description
    votesCount
    commentsCount
    createdAt
    featuredAt
    makerInside
    topics {
      edges {
        node {
          name
        }
      }
    }
"""

SEARCH_POSTS_QUERY = f"""
query($first: Int!, $postedAfter: DateTime) {{
  posts(first: $first, order: VOTES, postedAfter: $postedAfter) {{
    edges {{
      node {{{_POST_FIELDS}      }}
    }}
  }}
}}
"""

POST_BY_ID_QUERY = f"""
query($id: ID!) {{
  post(id: $id) {{{_POST_FIELDS}  }}
}}
"""


class ProductHuntClient:
    """Async Product Hunt client; every public call returns a FetchResult."""

    def __init__(
        self,
        token: str | None,
        *,
        endpoint: str = "https://api.producthunt.com/v2/api/graphql",
        posted_after: str = "2023-01-01",
        page_size: int = 20,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be a positive integer.")
        self._token = token or ""
        self._endpoint = endpoint
        self._posted_after = posted_after
        self._page_size = page_size
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> ProductHuntClient:
        return cls(
            settings.producthunt_token,
            endpoint=settings.producthunt_api_url,
            posted_after=settings.producthunt_posted_after,
            page_size=settings.producthunt_page_size,
            timeout=settings.upstream_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self._token)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._owns_http_client:
            await self._http.aclose()

    async def search_posts(self, term: str) -> FetchResult[list[ProductHuntPost]]:
        """Top-voted posts since the cutoff date that mention ``term``."""

        async def _call() -> list[ProductHuntPost]:
            data = await self._graphql(
                SEARCH_POSTS_QUERY,
                {"first": self._page_size, "postedAfter": f"{self._posted_after}T00:00:00Z"},
            )
            try:
                edges = data["posts"]["edges"]
            except (KeyError, TypeError) as exc:
                raise UpstreamSchemaError(SOURCE, "`posts.edges` missing from Product Hunt response.") from exc
            if not isinstance(edges, list):
                raise UpstreamSchemaError(SOURCE, "`posts.edges` must be a list.")
            posts = [_to_post(edge.get("node") if isinstance(edge, dict) else None) for edge in edges]
            return [post for post in posts if _mentions(post, term)]

        return await self._guarded("search_posts", _call, subject=term)

    async def get_post_by_id(self, post_id: str) -> FetchResult[ProductHuntPost | None]:
        async def _call() -> ProductHuntPost | None:
            data = await self._graphql(POST_BY_ID_QUERY, {"id": post_id})
            if not isinstance(data, dict):
                raise UpstreamSchemaError(SOURCE)
            node = data.get("post")
            if node is None:
                return None
            return _to_post(node)

        return await self._guarded("get_post", _call, subject=post_id)

    async def _guarded(
        self,
        operation: str,
        call: Callable[[], Awaitable[_T]],
        *,
        subject: str,
    ) -> FetchResult[_T]:
        if not self._token:
            return FetchResult.failure(UpstreamNotConfiguredError(SOURCE, "Product Hunt token not configured"))
        try:
            return FetchResult.success(await call())
        except UpstreamError as exc:
            logger.warning(
                "producthunt.request_failed",
                extra={"operation": operation, "subject": subject, "code": exc.code},
            )
            return FetchResult.failure(exc)

    async def _graphql(self, query: str, variables: dict[str, Any]) -> Any:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        try:
            response = await self._http.post(
                self._endpoint,
                json={"query": query, "variables": variables},
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(SOURCE) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"HTTP error calling Product Hunt: {exc}", "PRODUCTHUNT_ERROR", source=SOURCE) from exc

        if response.status_code == 429:
            raise UpstreamRateLimitError(SOURCE)
        if response.status_code in (408, 504):
            raise UpstreamTimeoutError(SOURCE)
        if response.status_code >= 400:
            raise UpstreamError(
                f"Product Hunt API error: {response.status_code} - {response.text[:200]}",
                "PRODUCTHUNT_ERROR",
                source=SOURCE,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamSchemaError(SOURCE, "Failed to decode Product Hunt response JSON.") from exc
        if not isinstance(payload, dict):
            raise UpstreamSchemaError(SOURCE)
        errors = payload.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise UpstreamError(f"Product Hunt GraphQL error: {message}", "PRODUCTHUNT_ERROR", source=SOURCE)
        return payload.get("data")

    async def __aenter__(self) -> ProductHuntClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _to_post(node: Any) -> ProductHuntPost:
    if not isinstance(node, dict):
        raise UpstreamSchemaError(SOURCE, "Post nodes must be JSON objects.")
    try:
        topic_edges = (node.get("topics") or {}).get("edges") or []
        return ProductHuntPost(
            id=str(node.get("id")),
            name=node.get("name"),
            slug=node.get("slug"),
            tagline=node.get("tagline") or "",
            description=node.get("description"),
            votes_count=node.get("votesCount") or 0,
            comments_count=node.get("commentsCount") or 0,
            created_at=node.get("createdAt"),
            featured_at=node.get("featuredAt"),
            maker_inside=bool(node.get("makerInside")),
            topics=[{"name": edge["node"]["name"]} for edge in topic_edges if edge.get("node")],
        )
    except (ValidationError, KeyError, TypeError, AttributeError) as exc:
        raise UpstreamSchemaError(SOURCE, f"Invalid Product Hunt post payload: {exc}") from exc


def _mentions(post: ProductHuntPost, term: str) -> bool:
    needle = term.strip().lower()
    if not needle:
        return True
    haystack = " ".join(filter(None, (post.name, post.slug, post.tagline, post.description))).lower()
    return needle in haystack
