#!/usr/bin/env python3
"""
Scoring Queue - producer side of the application-scoring queue.
"""

import logging
from typing import Any, Callable, Optional

from redis import Redis

from core.config_loader import ScoringQueueConfig
from core.job_queue import JobQueue
from scoring.tasks import process_scoring_task

logger = logging.getLogger(__name__)


class ScoringQueue(JobQueue):
    """One job per application id; RQ Retry governs re-attempts."""

    def __init__(
        self,
        config: Optional[ScoringQueueConfig] = None,
        connection: Optional[Redis] = None,
        is_async: bool = True,
        sync_handler: Optional[Callable[[str], Any]] = None,
    ):
        config = config or ScoringQueueConfig()
        super().__init__(
            name=config.name,
            task=process_scoring_task,
            connection=connection,
            is_async=is_async,
            job_timeout=config.job_timeout,
            retry_intervals=config.retry_intervals,
            sync_handler=sync_handler,
        )

    def enqueue_application(self, application_id: Any) -> str:
        return self.enqueue(str(application_id))
