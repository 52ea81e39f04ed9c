"""
Unit tests for the RQ queue wrapper.
"""
from unittest.mock import MagicMock, Mock, patch

import pytest

from core.job_queue import JobQueue


def _task(*args):
    return args


class TestAsyncMode:

    @patch('core.job_queue.Queue')
    def test_enqueue_with_retry_policy(self, mock_queue_class):
        rq_queue = mock_queue_class.return_value
        rq_queue.enqueue.return_value = Mock(id="job-1")
        redis_conn = Mock()

        queue = JobQueue(
            name="application-scoring",
            task=_task,
            connection=redis_conn,
            job_timeout="5m",
            retry_intervals=[10, 30, 60],
        )
        job_id = queue.enqueue("app-123")

        assert job_id == "job-1"
        mock_queue_class.assert_called_once_with("application-scoring", connection=redis_conn)
        args, kwargs = rq_queue.enqueue.call_args
        assert args == (_task, "app-123")
        assert kwargs["job_timeout"] == "5m"
        assert kwargs["retry"].max == 3
        assert kwargs["retry"].intervals == [10, 30, 60]
        assert "result_ttl" not in kwargs

    @patch('core.job_queue.Queue')
    def test_no_retry_without_intervals(self, mock_queue_class):
        mock_queue_class.return_value.enqueue.return_value = Mock(id="job-2")

        queue = JobQueue(name="q", task=_task, connection=Mock(), result_ttl=60)
        queue.enqueue({"type": "welcome"})

        kwargs = mock_queue_class.return_value.enqueue.call_args.kwargs
        assert "retry" not in kwargs
        assert kwargs["result_ttl"] == 60

    def test_async_mode_requires_connection(self):
        with pytest.raises(ValueError):
            JobQueue(name="q", task=_task, connection=None, is_async=True)

    @patch('core.job_queue.Queue')
    def test_status_reports_length_and_failures(self, mock_queue_class):
        rq_queue = MagicMock()
        rq_queue.__len__.return_value = 4
        rq_queue.failed_job_registry.count = 2
        mock_queue_class.return_value = rq_queue

        status = JobQueue(name="q", task=_task, connection=Mock()).get_status()

        assert status == {'name': 'q', 'mode': 'async', 'queue_length': 4, 'failed': 2}

    @patch('core.job_queue.Queue')
    def test_enqueue_failure_propagates(self, mock_queue_class):
        mock_queue_class.return_value.enqueue.side_effect = ConnectionError("redis down")
        queue = JobQueue(name="q", task=_task, connection=Mock())

        with pytest.raises(ConnectionError):
            queue.enqueue("x")


class TestSyncMode:

    def test_runs_sync_handler_inline(self):
        handler = Mock()
        queue = JobQueue(name="q", task=_task, is_async=False, sync_handler=handler)

        job_id = queue.enqueue("app-1")

        handler.assert_called_once_with("app-1")
        assert isinstance(job_id, str) and job_id

    def test_falls_back_to_task(self):
        task = Mock()
        JobQueue(name="q", task=task, is_async=False).enqueue("a", "b")
        task.assert_called_once_with("a", "b")

    def test_handler_errors_propagate(self):
        handler = Mock(side_effect=RuntimeError("boom"))
        queue = JobQueue(name="q", task=_task, is_async=False, sync_handler=handler)

        with pytest.raises(RuntimeError):
            queue.enqueue("x")

    def test_status(self):
        status = JobQueue(name="q", task=_task, is_async=False).get_status()
        assert status["mode"] == "sync"
        assert status["queue_length"] == 0
