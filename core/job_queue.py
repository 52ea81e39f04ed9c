#!/usr/bin/env python3
"""
Job Queue - thin wrapper over an RQ queue.

Every background concern (application scoring, outbound email) owns one
named queue. In async mode jobs go to Redis with an RQ Retry policy; in
sync mode the handler runs inline in the calling process.

Usage:
    queue = JobQueue(
        name="application-scoring",
        task=process_scoring_task,
        connection=redis_conn,
        retry_intervals=[10, 30, 60],
    )
    job_id = queue.enqueue(str(application.id))
"""

import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from redis import Redis
from rq import Queue, Retry

logger = logging.getLogger(__name__)


class JobQueue:
    """A named work queue with a fixed task function and retry policy."""

    def __init__(
        self,
        name: str,
        task: Callable[..., Any],
        connection: Optional[Redis] = None,
        is_async: bool = True,
        job_timeout: str = '5m',
        retry_intervals: Optional[List[int]] = None,
        result_ttl: Optional[int] = None,
        sync_handler: Optional[Callable[..., Any]] = None,
    ):
        """
        Args:
            name: Queue name shared by producers and workers
            task: Module-level function RQ imports in the worker process
            connection: Redis connection (required in async mode)
            is_async: False runs jobs inline instead of enqueueing
            job_timeout: RQ job timeout
            retry_intervals: Seconds between attempts; its length is the retry count
            result_ttl: How long RQ keeps successful job results
            sync_handler: Callable used instead of `task` in sync mode
        """
        self.name = name
        self.task = task
        self.is_async = is_async
        self.job_timeout = job_timeout
        self.retry_intervals = list(retry_intervals or [])
        self.result_ttl = result_ttl
        self.sync_handler = sync_handler

        if is_async:
            if connection is None:
                raise ValueError(f"Queue '{name}' needs a Redis connection in async mode")
            self.queue: Optional[Queue] = Queue(name, connection=connection)
        else:
            self.queue = None

    def _retry_policy(self) -> Optional[Retry]:
        if not self.retry_intervals:
            return None
        return Retry(max=len(self.retry_intervals), interval=self.retry_intervals)

    def enqueue(self, *args: Any) -> str:
        """
        Enqueue one job and return its id.

        In sync mode the handler runs before this returns and its
        exceptions propagate to the caller.
        """
        if self.is_async:
            kwargs: Dict[str, Any] = {'job_timeout': self.job_timeout}
            retry = self._retry_policy()
            if retry is not None:
                kwargs['retry'] = retry
            if self.result_ttl is not None:
                kwargs['result_ttl'] = self.result_ttl

            job = self.queue.enqueue(self.task, *args, **kwargs)
            logger.info(f"Queued {self.name} job {job.id}")
            return job.id

        job_id = str(uuid.uuid4())
        logger.info(f"Running {self.name} job {job_id} inline (sync mode)")
        handler = self.sync_handler or self.task
        handler(*args)
        return job_id

    def get_status(self) -> Dict[str, Any]:
        """Queue length and failed job count, for operator stats."""
        if not self.is_async:
            return {'name': self.name, 'mode': 'sync', 'queue_length': 0, 'failed': 0}

        try:
            return {
                'name': self.name,
                'mode': 'async',
                'queue_length': len(self.queue),
                'failed': self.queue.failed_job_registry.count,
            }
        except Exception as e:
            logger.error(f"Could not read status of queue {self.name}: {e}")
            return {'name': self.name, 'mode': 'async', 'status': 'error', 'error': str(e)}
