from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SourceMetadata(BaseModel):
    source_name: str
    source_id: str
    raw_snippet: str
    crawl_ts: datetime
    confidence: float = Field(ge=0, le=1)


class SignalChainStep(BaseModel):
    status: str
    timestamp: datetime
    processor: str


class MLClassification(BaseModel):
    category: str
    value: str
    confidence: float = Field(ge=0, le=1)


class SignalMetadata(BaseModel):
    """Provenance record behind a signal: sources, processing chain, tags."""

    id: int
    entity_name: str
    source_metadata: list[SourceMetadata]
    ingestion_timestamp: datetime
    signal_chain: list[SignalChainStep]
    tags: list[str] = Field(default_factory=list)
    ml_classifications: list[MLClassification] = Field(default_factory=list)
    associated_links: list[str] = Field(default_factory=list)
    quality_score: float = Field(ge=0, le=1)
    processing_notes: str | None = None
