#!/usr/bin/env python3
"""
Stats endpoints - scoring pipeline health.
"""

from fastapi import APIRouter, Depends

from core.app_context import AppContext
from ..dependencies import CurrentUser, get_context, get_current_user
from ..services.stats_service import StatsService
from ..models.responses import ScoringStatsResponse

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/scoring", response_model=ScoringStatsResponse)
def get_scoring_stats(
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """
    Counts per status, applications stuck in 'scoring' and queue status.

    Applications stuck in 'scoring' have exhausted their retries or were
    never enqueued; move them to 'scoring' again to re-score.
    """
    return StatsService(context).get_scoring_stats()
