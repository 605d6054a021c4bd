"""Single-metric lookup for the Dive module."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.models.metric import Metric
from app.services.catalog.metrics import MetricCatalog, get_metric_catalog

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/metrics/{metric_name}",
    response_model=Metric,
    responses={404: {"description": "Unknown metric; body lists the available names."}},
)
async def get_metric(
    metric_name: str,
    catalog: MetricCatalog = Depends(get_metric_catalog),
):
    """Return one canonical metric stamped with the current time."""
    metric = catalog.get(metric_name)
    if metric is None:
        logger.info("metrics.not_found", extra={"metric_name": metric_name})
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Metric not found", "available_metrics": catalog.names()},
        )
    return metric
