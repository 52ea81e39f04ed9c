#!/usr/bin/env python3
"""
Notification Channels

Outbound email over SMTP. The channel only delivers: rendering and
retries live in the notification service and the job queue.

Usage:
    from notification.channels import EmailChannel

    channel = EmailChannel(config.email)
    message_id = channel.send(from_address, recipient, subject, html_body)
"""

from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
import logging
import smtplib

from core.config_loader import EmailConfig

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """The email could not be handed to the mail server."""
    pass


def _mask_email(email: str) -> str:
    """
    Mask email address for safe logging (PII protection).

    Shows only domain, e.g., "***@example.com"
    """
    if not email or '@' not in email:
        return "***"
    local, domain = email.rsplit('@', 1)
    return f"***@{domain}"


class NotificationChannel(ABC):
    """
    Abstract base class for notification channels.
    """

    @property
    @abstractmethod
    def channel_type(self) -> str:
        """Return the channel type identifier."""
        pass

    @abstractmethod
    def send(self, from_address: str, recipient: str, subject: str, html_body: str) -> str:
        """
        Deliver one message.

        Returns:
            Provider message id

        Raises:
            EmailDeliveryError: delivery failed; the job should be retried
        """
        pass


class EmailChannel(NotificationChannel):
    """Email notification channel via SMTP."""

    def __init__(self, config: EmailConfig):
        self.config = config

    @property
    def channel_type(self) -> str:
        return 'email'

    def _build_message(self, from_address: str, recipient: str, subject: str,
                       html_body: str, message_id: str) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['From'] = from_address
        msg['To'] = recipient
        msg['Subject'] = subject
        msg['Message-ID'] = message_id
        msg.attach(MIMEText(html_body, 'html', 'utf-8'))
        return msg

    def send(self, from_address: str, recipient: str, subject: str, html_body: str) -> str:
        domain = from_address.rsplit('@', 1)[-1].strip('> ') if '@' in from_address else None
        message_id = make_msgid(domain=domain)

        if self.config.dry_run:
            logger.info(f"[DRY RUN] Email to {_mask_email(recipient)}: {subject}")
            return message_id

        msg = self._build_message(from_address, recipient, subject, html_body, message_id)

        try:
            with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=30) as server:
                if self.config.use_tls:
                    server.starttls()
                if self.config.smtp_username and self.config.smtp_password:
                    server.login(self.config.smtp_username, self.config.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {_mask_email(recipient)}: {e}")
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"Email sent to {_mask_email(recipient)} ({message_id})")
        return message_id
