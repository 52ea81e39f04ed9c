"""Client-side poller for a user's applications."""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception,
    before_sleep_log
)

logger = logging.getLogger(__name__)

SCORING_STATUS = "scoring"
DEFAULT_POLL_INTERVAL_SECONDS = 2.0


def _is_retryable_error(exc: Exception) -> bool:
    """
    Retry timeouts, connection errors and 5xx responses; never 4xx.
    """
    if isinstance(exc, requests.Timeout):
        return True

    if isinstance(exc, requests.RequestException):
        response = getattr(exc, 'response', None)
        if response is not None:
            return response.status_code >= 500
        return True

    return False


class ApplicationPoller:
    """
    Polls GET /api/applications while any application is still being scored.

    Responsibilities:
    - Own a requests.Session for connection reuse
    - Fetch the acting user's applications
    - Re-fetch every poll interval until nothing is in 'scoring'
    """

    def __init__(
        self,
        base_url: str,
        user_id: str,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        request_timeout_seconds: int = 30,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the poller.

        Args:
            base_url: Base URL of the Launchpad API
            user_id: Identity forwarded in the X-User-Id header
            poll_interval_seconds: Seconds between fetches while scoring
            request_timeout_seconds: Timeout for individual HTTP requests
            session: Optional pre-configured session
            sleep: Sleep function (injectable for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.user_id = str(user_id)
        self.poll_interval_seconds = poll_interval_seconds
        self.request_timeout_seconds = request_timeout_seconds
        self.session = session or requests.Session()
        self._sleep = sleep

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception(_is_retryable_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def fetch(self) -> List[Dict[str, Any]]:
        """Fetch the current snapshot of applications."""
        response = self.session.get(
            f"{self.base_url}/api/applications",
            headers={"X-User-Id": self.user_id},
            timeout=self.request_timeout_seconds
        )
        response.raise_for_status()
        return response.json().get("applications", [])

    @staticmethod
    def needs_polling(applications: List[Dict[str, Any]]) -> bool:
        return any(app.get("status") == SCORING_STATUS for app in applications)

    def poll(
        self,
        on_update: Optional[Callable[[List[Dict[str, Any]]], None]] = None,
        max_cycles: Optional[int] = None,
        stop_event: Optional[threading.Event] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch until no application is in 'scoring'.

        Args:
            on_update: Called with every fetched snapshot
            max_cycles: Stop after this many fetches even if still scoring
            stop_event: Threading event for cancellation

        Returns:
            The last fetched snapshot
        """
        cycles = 0
        while True:
            applications = self.fetch()
            cycles += 1

            if on_update is not None:
                on_update(applications)

            if not self.needs_polling(applications):
                return applications

            if max_cycles is not None and cycles >= max_cycles:
                logger.info(f"Stopped polling after {cycles} cycles with applications still scoring")
                return applications

            if stop_event is not None and stop_event.is_set():
                logger.info("Polling cancelled")
                return applications

            pending = sum(1 for app in applications if app.get("status") == SCORING_STATUS)
            logger.debug(f"{pending} application(s) still scoring; next poll in {self.poll_interval_seconds}s")
            self._sleep(self.poll_interval_seconds)

    def close(self):
        """Close the session and release resources."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
