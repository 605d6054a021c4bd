from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from app.config import settings
from app.services.signals.aggregator import SignalAggregationService, get_signal_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "integrations": settings.integration_status(),
    }


@router.get("/ready")
async def readiness_check(service: SignalAggregationService = Depends(get_signal_service)):
    """Readiness check including the signal cache state."""
    return {
        "status": "ready",
        "version": settings.app_version,
        "environment": settings.environment,
        "cache": service.get_cache_status(),
    }
