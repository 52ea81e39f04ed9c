#!/usr/bin/env python3
"""
Notification Tracker - Deduplication Service

Prevents the same event from producing more than one email when a job is
delivered more than once (RQ is at-least-once).

Usage:
    from notification.tracker import RedisNotificationTracker

    tracker = RedisNotificationTracker(redis_conn, ttl_seconds=604800)

    if tracker.claim("new-application", application_id):
        enqueue(...)
"""

import hashlib
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Set

from redis import Redis

logger = logging.getLogger(__name__)


class NotificationTracker(ABC):
    """
    Remembers which (event_type, subject) pairs have already been notified.
    """

    KEY_PREFIX = "notification:sent:"

    def generate_dedup_key(self, event_type: str, subject_id: Any) -> str:
        raw = f"{event_type}|{subject_id}"
        digest = hashlib.sha256(raw.encode('utf-8')).hexdigest()[:32]
        return f"{self.KEY_PREFIX}{event_type}:{digest}"

    @abstractmethod
    def claim(self, event_type: str, subject_id: Any) -> bool:
        """
        Atomically mark the event as notified.

        Returns:
            True if this caller owns the notification, False if it was
            already claimed
        """
        pass

    @abstractmethod
    def release(self, event_type: str, subject_id: Any) -> None:
        """Forget a claim (the notification could not be enqueued)."""
        pass


class RedisNotificationTracker(NotificationTracker):
    """Claims are `SET NX` keys with a TTL, shared by every worker."""

    def __init__(self, redis_conn: Redis, ttl_seconds: int = 7 * 24 * 3600):
        self.redis = redis_conn
        self.ttl_seconds = ttl_seconds

    def claim(self, event_type: str, subject_id: Any) -> bool:
        key = self.generate_dedup_key(event_type, subject_id)
        claimed = bool(self.redis.set(key, "1", nx=True, ex=self.ttl_seconds))
        if not claimed:
            logger.info(f"Suppressing duplicate {event_type} notification for {subject_id}")
        return claimed

    def release(self, event_type: str, subject_id: Any) -> None:
        self.redis.delete(self.generate_dedup_key(event_type, subject_id))


class InMemoryNotificationTracker(NotificationTracker):
    """Process-local claims, used in sync mode and tests."""

    def __init__(self):
        self._claimed: Set[str] = set()
        self._lock = threading.Lock()

    def claim(self, event_type: str, subject_id: Any) -> bool:
        key = self.generate_dedup_key(event_type, subject_id)
        with self._lock:
            if key in self._claimed:
                logger.info(f"Suppressing duplicate {event_type} notification for {subject_id}")
                return False
            self._claimed.add(key)
            return True

    def release(self, event_type: str, subject_id: Any) -> None:
        with self._lock:
            self._claimed.discard(self.generate_dedup_key(event_type, subject_id))
