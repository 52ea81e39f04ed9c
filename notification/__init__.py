"""
Notification Module

Transactional email for the marketplace: welcome, new-application alert
and decision emails, delivered through an RQ queue.

Usage:
    from notification import NotificationService, EmailChannel

    service = NotificationService(EmailChannel(config.email), tracker, config.email.from_address)
    service.notify_welcome('ada@example.com', 'Ada', 'student')
"""

from notification.channels import (
    NotificationChannel,
    EmailChannel,
    EmailDeliveryError,
)

from notification.jobs import (
    WelcomeEmail,
    NewApplicationEmail,
    DecisionEmail,
    EmailJob,
    parse_email_job,
)

from notification.templates import (
    RenderedEmail,
    render_email,
    DEFAULT_ACCEPTANCE_EMAIL,
    DEFAULT_REJECTION_EMAIL,
)

from notification.tracker import (
    NotificationTracker,
    RedisNotificationTracker,
    InMemoryNotificationTracker,
)

from notification.service import (
    NotificationService,
    process_email_task,
)

__all__ = [
    # Channels
    'NotificationChannel',
    'EmailChannel',
    'EmailDeliveryError',
    # Jobs
    'WelcomeEmail',
    'NewApplicationEmail',
    'DecisionEmail',
    'EmailJob',
    'parse_email_job',
    # Templates
    'RenderedEmail',
    'render_email',
    'DEFAULT_ACCEPTANCE_EMAIL',
    'DEFAULT_REJECTION_EMAIL',
    # Tracker
    'NotificationTracker',
    'RedisNotificationTracker',
    'InMemoryNotificationTracker',
    # Service
    'NotificationService',
    'process_email_task',
]
