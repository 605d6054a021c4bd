from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel


class MetricProvenance(str, Enum):
    """Where a metric value came from."""

    MOCK = "mock"
    LIVE = "live"
    CALCULATED = "calculated"


class Metric(BaseModel):
    """A single named measurement served by the Dive endpoints."""

    metric: str
    value: Any
    type: Literal["number", "boolean", "timestamp", "object"]
    unit: str | None = None
    range: str | None = None
    description: str
    timestamp: datetime
    source: str
    provenance: MetricProvenance = MetricProvenance.MOCK
