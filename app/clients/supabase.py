"""Optional managed-database adapter speaking Supabase REST (PostgREST)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from app.clients.errors import UpstreamError, UpstreamTimeoutError
from app.config import Settings, settings

logger = logging.getLogger(__name__)

SOURCE = "supabase"

METRICS_TABLE = "startup_metrics"
WATCHLIST_TABLE = "user_watchlists"
SIGNAL_METADATA_TABLE = "signal_metadata"
USER_ACTIONS_TABLE = "user_actions"


class SupabaseClient:
    """Reads and writes per-startup metrics, watchlists and user actions.

    Every operation is a no-op returning a safe default (``None``, ``False`` or
    an empty list) when the database is not configured or the call fails.
    """

    def __init__(
        self,
        *,
        base_url: str | None,
        api_key: str | None,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base = (base_url or "").rstrip("/")
        self._api_key = api_key or ""
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        if not self.configured:
            logger.warning("supabase.not_configured")

    @classmethod
    def from_settings(cls, app_settings: Settings) -> SupabaseClient:
        return cls(
            base_url=app_settings.supabase_url,
            api_key=app_settings.supabase_anon_key,
            timeout=app_settings.upstream_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self._base and self._api_key)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def get_startup_metrics(self, startup_id: int) -> dict[str, Any] | None:
        if not self.configured:
            return None
        try:
            rows = await self._select(METRICS_TABLE, {"startup_id": f"eq.{startup_id}"})
        except UpstreamError as exc:
            self._log_failure("get_startup_metrics", exc, startup_id=startup_id)
            return None
        return rows[0] if rows else None

    async def update_startup_metric(self, startup_id: int, metric_name: str, value: Any) -> bool:
        if not self.configured:
            return False
        row = {
            "startup_id": startup_id,
            "metric_name": metric_name,
            "value": value,
            "updated_at": _utcnow_iso(),
        }
        try:
            await self._insert(METRICS_TABLE, row, upsert_on="startup_id,metric_name")
        except UpstreamError as exc:
            self._log_failure("update_startup_metric", exc, startup_id=startup_id)
            return False
        return True

    async def get_user_watchlist(self, user_id: str) -> list[dict[str, Any]]:
        if not self.configured:
            return []
        try:
            return await self._select(
                WATCHLIST_TABLE,
                {"user_id": f"eq.{user_id}"},
                columns="startup_id,created_at",
            )
        except UpstreamError as exc:
            self._log_failure("get_user_watchlist", exc, user_id=user_id)
            return []

    async def add_to_watchlist(self, user_id: str, startup_id: int) -> bool:
        if not self.configured:
            return False
        row = {"user_id": user_id, "startup_id": startup_id, "created_at": _utcnow_iso()}
        try:
            await self._insert(WATCHLIST_TABLE, row)
        except UpstreamError as exc:
            self._log_failure("add_to_watchlist", exc, user_id=user_id, startup_id=startup_id)
            return False
        return True

    async def get_signal_metadata(self, signal_id: int) -> dict[str, Any] | None:
        if not self.configured:
            return None
        try:
            rows = await self._select(SIGNAL_METADATA_TABLE, {"signal_id": f"eq.{signal_id}"})
        except UpstreamError as exc:
            self._log_failure("get_signal_metadata", exc, signal_id=signal_id)
            return None
        return rows[0] if rows else None

    async def log_user_action(
        self,
        user_id: str,
        action: str,
        entity_id: int,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        if not self.configured:
            return False
        row = {
            "user_id": user_id,
            "action": action,
            "entity_id": entity_id,
            "metadata": metadata,
            "created_at": _utcnow_iso(),
        }
        try:
            await self._insert(USER_ACTIONS_TABLE, row)
        except UpstreamError as exc:
            self._log_failure("log_user_action", exc, user_id=user_id, entity_id=entity_id)
            return False
        return True

    def _headers(self, *, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _table_url(self, table: str) -> str:
        return f"{self._base}/rest/v1/{table}"

    async def _select(
        self,
        table: str,
        filters: dict[str, str],
        *,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        params = {"select": columns, **filters}
        response = await self._send("GET", table, params=params, headers=self._headers())
        try:
            rows = response.json()
        except ValueError as exc:
            raise UpstreamError("Failed to decode Supabase response JSON.", "SUPABASE_SCHEMA_ERR", source=SOURCE) from exc
        if not isinstance(rows, list):
            raise UpstreamError("Supabase select must return a list.", "SUPABASE_SCHEMA_ERR", source=SOURCE)
        return rows

    async def _insert(self, table: str, row: dict[str, Any], *, upsert_on: str | None = None) -> None:
        prefer = "return=minimal"
        params: dict[str, str] = {}
        if upsert_on:
            prefer = "resolution=merge-duplicates,return=minimal"
            params["on_conflict"] = upsert_on
        await self._send("POST", table, params=params, json=row, headers=self._headers(prefer=prefer))

    async def _send(self, method: str, table: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, self._table_url(table), **kwargs)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(SOURCE) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"HTTP error calling Supabase: {exc}", "SUPABASE_ERROR", source=SOURCE) from exc
        if response.status_code >= 400:
            raise UpstreamError(
                f"Supabase {method} {table} failed with status {response.status_code}",
                "SUPABASE_ERROR",
                source=SOURCE,
            )
        return response

    @staticmethod
    def _log_failure(operation: str, exc: UpstreamError, **context: Any) -> None:
        logger.warning(
            "supabase.request_failed",
            extra={"operation": operation, "code": exc.code, **context},
        )


def _utcnow_iso() -> str:
    return datetime.now(UTC).isoformat()


_CLIENT_INSTANCE: SupabaseClient | None = None


def get_supabase_client() -> SupabaseClient:
    """Process-wide accessor used by API routes."""
    global _CLIENT_INSTANCE  # noqa: PLW0603
    if _CLIENT_INSTANCE is None:
        _CLIENT_INSTANCE = SupabaseClient.from_settings(settings)
    return _CLIENT_INSTANCE


async def shutdown_supabase_client() -> None:
    global _CLIENT_INSTANCE  # noqa: PLW0603
    if _CLIENT_INSTANCE is not None:
        await _CLIENT_INSTANCE.aclose()
        _CLIENT_INSTANCE = None
