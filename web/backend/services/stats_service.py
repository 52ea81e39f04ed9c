#!/usr/bin/env python3
"""
Stats service - operator view of the scoring pipeline.

An application that stays in 'scoring' longer than the configured
threshold has almost certainly exhausted its retries (or was never
enqueued) and needs a manual re-score.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.app_context import AppContext
from database.uow import unit_of_work
from ..models.responses import ScoringStatsResponse

logger = logging.getLogger(__name__)


def _age_seconds(then: Optional[datetime], now: datetime) -> Optional[float]:
    if then is None:
        return None
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    return max(0.0, (now - then).total_seconds())


class StatsService:
    def __init__(self, context: AppContext):
        self.context = context

    def get_scoring_stats(self, now: Optional[datetime] = None) -> ScoringStatsResponse:
        now = now or datetime.now(timezone.utc)
        threshold = self.context.config.applications.stuck_scoring_after_seconds
        stuck_before = now - timedelta(seconds=threshold)

        with unit_of_work(self.context.database) as repos:
            stats = repos.applications.get_scoring_stats(stuck_before)

        if stats.stuck_scoring:
            logger.warning(f"{stats.stuck_scoring} application(s) stuck in scoring for over {threshold}s")

        return ScoringStatsResponse(
            success=True,
            counts_by_status=stats.counts_by_status,
            stuck_scoring=stats.stuck_scoring,
            stuck_after_seconds=threshold,
            oldest_scoring_age_seconds=_age_seconds(stats.oldest_scoring_updated_at, now),
            queues={
                "scoring": self.context.scoring_queue.get_status(),
                "notifications": self.context.notification_service.get_queue_status(),
            },
        )
