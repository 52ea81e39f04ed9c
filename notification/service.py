#!/usr/bin/env python3
"""
Notification Service

Producer and consumer side of the email queue:
- notify_* methods validate a job payload and enqueue it
- deliver() renders the payload and hands it to the email channel
  (called by the RQ worker via process_email_task)

New-application alerts are claimed in the tracker before enqueueing so a
redelivered scoring job does not alert the startup twice.

Usage:
    from notification.service import NotificationService

    service = NotificationService(channel, tracker, from_address,
                                  redis_conn=redis_conn)
    service.notify_welcome("ada@example.com", "Ada", "student")
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel
from redis import Redis

from core.config_loader import NotificationQueueConfig
from core.job_queue import JobQueue
from notification.channels import NotificationChannel, _mask_email
from notification.jobs import (
    WelcomeEmail,
    NewApplicationEmail,
    DecisionEmail,
    parse_email_job,
)
from notification.templates import render_email
from notification.tracker import NotificationTracker

logger = logging.getLogger(__name__)

NEW_APPLICATION_EVENT = "new-application"


class NotificationService:
    """
    Enqueues and delivers transactional email.
    """

    def __init__(
        self,
        channel: NotificationChannel,
        tracker: NotificationTracker,
        from_address: str,
        redis_conn: Optional[Redis] = None,
        use_async_queue: bool = True,
        queue_config: Optional[NotificationQueueConfig] = None,
    ):
        """
        Initialize notification service.

        Args:
            channel: Channel used to deliver rendered emails
            tracker: Deduplication tracker for new-application alerts
            from_address: Sender address for every email
            redis_conn: Redis connection (async mode only)
            use_async_queue: False delivers inline in the calling process
            queue_config: Queue name, timeout and retry settings
        """
        self.channel = channel
        self.tracker = tracker
        self.from_address = from_address

        queue_config = queue_config or NotificationQueueConfig()
        self.queue = JobQueue(
            name=queue_config.name,
            task=process_email_task,
            connection=redis_conn,
            is_async=use_async_queue,
            job_timeout=queue_config.job_timeout,
            retry_intervals=queue_config.retry_intervals,
            result_ttl=queue_config.result_ttl,
            sync_handler=self.deliver,
        )

    def enqueue_email(self, job: BaseModel) -> str:
        """Enqueue a validated email job and return the queue job id."""
        # Round-trip through the union so a bad payload never reaches Redis
        payload = parse_email_job(job.model_dump()).model_dump()
        logger.info(f"Enqueuing {payload['type']} email to {_mask_email(job.recipient)}")
        return self.queue.enqueue(payload)

    def notify_welcome(self, email: str, full_name: Optional[str], role: str) -> str:
        return self.enqueue_email(WelcomeEmail(email=email, full_name=full_name, role=role))

    def notify_new_application(
        self,
        application_id: Any,
        company_email: str,
        company_name: str,
        applicant_name: str,
        job_title: str,
        score: int,
    ) -> Optional[str]:
        """
        Alert the startup about a scored application, at most once per application.

        Returns:
            Queue job id, or None if the alert was already sent
        """
        job = NewApplicationEmail(
            company_email=company_email,
            company_name=company_name,
            applicant_name=applicant_name,
            job_title=job_title,
            score=score,
        )

        if not self.tracker.claim(NEW_APPLICATION_EVENT, application_id):
            return None

        try:
            return self.enqueue_email(job)
        except Exception:
            self.tracker.release(NEW_APPLICATION_EVENT, application_id)
            raise

    def notify_decision(
        self,
        student_email: str,
        student_name: str,
        job_title: str,
        company_name: str,
        status: str,
        email_body: Optional[str],
    ) -> str:
        return self.enqueue_email(DecisionEmail(
            student_email=student_email,
            student_name=student_name,
            job_title=job_title,
            company_name=company_name,
            status=status,
            email_body=email_body,
        ))

    def deliver(self, job_data: Dict[str, Any]) -> str:
        """
        Render and send one email job.

        Raises:
            pydantic.ValidationError: malformed payload
            EmailDeliveryError: channel failed (RQ retries the job)
        """
        job = parse_email_job(job_data)
        rendered = render_email(job)
        message_id = self.channel.send(self.from_address, job.recipient, rendered.subject, rendered.html)
        logger.info(f"Delivered {job.type} email to {_mask_email(job.recipient)} ({message_id})")
        return message_id

    def get_queue_status(self) -> Dict[str, Any]:
        return self.queue.get_status()


# Worker task - must be at module level for RQ
def process_email_task(job_data: Dict[str, Any]) -> str:
    """Deliver one email job (called by RQ worker)."""
    from core.app_context import get_process_context

    return get_process_context().notification_service.deliver(job_data)
