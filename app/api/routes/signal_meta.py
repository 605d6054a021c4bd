"""Signal provenance endpoint backing the raw signal breakdown modal."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.clients.supabase import SupabaseClient, get_supabase_client
from app.models.signal_meta import SignalMetadata
from app.services.catalog.signal_meta import SignalMetaCatalog, get_signal_meta_catalog

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/signal_meta/{signal_id}",
    response_model=SignalMetadata,
    responses={404: {"description": "Unknown signal id; body lists the available ids."}},
)
async def get_signal_meta(
    signal_id: int,
    catalog: SignalMetaCatalog = Depends(get_signal_meta_catalog),
    database: SupabaseClient = Depends(get_supabase_client),
):
    """Prefer the stored record when the managed database has one."""
    row = await database.get_signal_metadata(signal_id)
    if row is not None:
        try:
            return SignalMetadata.model_validate(row)
        except ValidationError as exc:
            logger.warning(
                "signal_meta.invalid_row",
                extra={"signal_id": signal_id, "errors": exc.error_count()},
            )

    meta = catalog.get(signal_id)
    if meta is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "Signal metadata not found",
                "available_ids": [str(known) for known in catalog.ids()],
                "message": "This entity may not have detailed signal metadata available yet.",
            },
        )
    return meta
