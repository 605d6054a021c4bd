"""Watchlist and user-action endpoints passing through to the managed database."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from app.clients.supabase import SupabaseClient, get_supabase_client

router = APIRouter()
logger = logging.getLogger(__name__)


class WatchlistAddRequest(BaseModel):
    user_id: str = Field(min_length=1)
    startup_id: int


class UserActionRequest(BaseModel):
    """A dashboard interaction such as routing a startup to Build."""

    user_id: str = Field(min_length=1)
    action: str = Field(min_length=1)
    entity_id: int
    metadata: dict[str, Any] | None = None


class WriteResult(BaseModel):
    stored: bool
    persisted_to: str | None = None


@router.get("/watchlist/{user_id}")
async def get_watchlist(
    user_id: str,
    database: SupabaseClient = Depends(get_supabase_client),
) -> dict[str, Any]:
    items = await database.get_user_watchlist(user_id)
    return {"user_id": user_id, "items": items, "configured": database.configured}


@router.post("/watchlist", response_model=WriteResult, status_code=status.HTTP_202_ACCEPTED)
async def add_to_watchlist(
    payload: WatchlistAddRequest,
    database: SupabaseClient = Depends(get_supabase_client),
) -> WriteResult:
    stored = await database.add_to_watchlist(payload.user_id, payload.startup_id)
    return _write_result(stored)


@router.post("/actions", response_model=WriteResult, status_code=status.HTTP_202_ACCEPTED)
async def log_action(
    payload: UserActionRequest,
    database: SupabaseClient = Depends(get_supabase_client),
) -> WriteResult:
    stored = await database.log_user_action(
        payload.user_id,
        payload.action,
        payload.entity_id,
        payload.metadata,
    )
    if not stored:
        logger.info(
            "actions.not_persisted",
            extra={"user_id": payload.user_id, "action": payload.action, "entity_id": payload.entity_id},
        )
    return _write_result(stored)


def _write_result(stored: bool) -> WriteResult:
    return WriteResult(stored=stored, persisted_to="supabase" if stored else None)
