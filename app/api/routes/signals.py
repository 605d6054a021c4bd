"""Startup signal feed backed by the aggregation service."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.models.startup_signal import StartupSignal
from app.services.signals.aggregator import SignalAggregationService, get_signal_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/signals", response_model=list[StartupSignal])
async def list_signals(
    service: SignalAggregationService = Depends(get_signal_service),
) -> list[StartupSignal]:
    """Return one signal per tracked startup."""
    return await service.get_startup_signals()


@router.get("/signals/cache/status")
async def cache_status(service: SignalAggregationService = Depends(get_signal_service)) -> dict[str, int]:
    return service.get_cache_status()


@router.delete("/signals/cache")
async def clear_cache(service: SignalAggregationService = Depends(get_signal_service)) -> dict[str, Any]:
    service.clear_cache()
    return {"cleared": True, **service.get_cache_status()}


@router.get("/signals/{signal_id}", response_model=StartupSignal)
async def get_signal(
    signal_id: int,
    service: SignalAggregationService = Depends(get_signal_service),
):
    signal = await service.get_startup_by_id(signal_id)
    if signal is None:
        return _not_found(signal_id, service)
    return signal


@router.post("/signals/{signal_id}/refresh", response_model=StartupSignal)
async def refresh_signal(
    signal_id: int,
    service: SignalAggregationService = Depends(get_signal_service),
):
    """Bypass the cache for one startup and recompute its signal."""
    signal = await service.refresh_startup_data(signal_id)
    if signal is None:
        return _not_found(signal_id, service)
    logger.info("signals.refreshed", extra={"entity_id": signal_id, "real_time_data": signal.real_time_data})
    return signal


def _not_found(signal_id: int, service: SignalAggregationService) -> JSONResponse:
    logger.info("signals.not_found", extra={"entity_id": signal_id})
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Startup not found", "available_ids": service.entity_ids},
    )
