from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.models.score_breakdown import ScoreBreakdown
from app.services.catalog.breakdowns import (
    DEFAULT_SCORE_NAME,
    ScoreBreakdownCatalog,
    get_score_breakdown_catalog,
)

router = APIRouter()


@router.get("/score_breakdown/{entity_id}", response_model=ScoreBreakdown)
async def get_score_breakdown(
    entity_id: int,
    score: str = Query(DEFAULT_SCORE_NAME, description="Score to explain."),
    catalog: ScoreBreakdownCatalog = Depends(get_score_breakdown_catalog),
) -> ScoreBreakdown:
    """Explain a score; unknown entity/score pairs get a synthesised breakdown."""
    return catalog.get(entity_id, score)
