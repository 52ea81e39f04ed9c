#!/usr/bin/env python3
"""
Email templates.

Rendering is a pure function of the job payload: every interpolated value
is HTML-escaped and multiline bodies keep their line breaks.
"""

import html
from dataclasses import dataclass
from typing import Optional

from notification.jobs import WelcomeEmail, NewApplicationEmail, DecisionEmail

DEFAULT_ACCEPTANCE_EMAIL = "\n".join([
    "Congratulations! We are pleased to inform you that you have been selected.",
    "We were impressed by your qualifications and believe you will be a great addition to our team.",
    "",
    "Our team will reach out shortly with next steps regarding onboarding and start date details.",
])

DEFAULT_REJECTION_EMAIL = "\n".join([
    "Thank you for your interest in this position.",
    "After careful consideration, we have decided to move forward with other candidates whose "
    "experience more closely matches our current needs.",
    "",
    "We appreciate the time you invested in applying and encourage you to apply for future "
    "opportunities that align with your skills.",
])


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str


def _escape(value) -> str:
    return html.escape(str(value), quote=True)


def _multiline(value: str) -> str:
    return "<br />".join(_escape(line) for line in value.split("\n"))


def _wrap(body_html: str) -> str:
    return f'<div style="font-family: Arial, sans-serif; color: #111; line-height: 1.5;">{body_html}</div>'


def default_decision_body(status: str) -> str:
    return DEFAULT_ACCEPTANCE_EMAIL if status == 'accepted' else DEFAULT_REJECTION_EMAIL


def resolve_decision_body(status: str, email_body: Optional[str]) -> str:
    """Company text if it has any content, otherwise the built-in default."""
    if email_body and email_body.strip():
        return email_body
    return default_decision_body(status)


def _render_welcome(job: WelcomeEmail) -> RenderedEmail:
    display_name = (job.full_name or "").strip() or "there"
    if job.role == 'student':
        role_line = "You can now complete your profile and apply for roles."
    else:
        role_line = "You can now post roles and review applicants."

    body = (
        f"<p>Hi {_escape(display_name)},</p>"
        "<p>Welcome to Launchpad.</p>"
        f"<p>{_escape(role_line)}</p>"
        "<p>Thanks,<br />The Launchpad Team</p>"
    )
    return RenderedEmail(subject="Welcome to Launchpad", html=_wrap(body))


def _render_new_application(job: NewApplicationEmail) -> RenderedEmail:
    body = (
        f"<p>Hi {_escape(job.company_name)},</p>"
        "<p>You have a new application ready for review.</p>"
        f"<p><strong>Applicant:</strong> {_escape(job.applicant_name)}</p>"
        f"<p><strong>Role:</strong> {_escape(job.job_title)}</p>"
        f"<p><strong>Score:</strong> {int(job.score)}</p>"
        "<p>Log in to review the full details.</p>"
    )
    return RenderedEmail(subject=f"New application for {job.job_title}", html=_wrap(body))


def _render_decision(job: DecisionEmail) -> RenderedEmail:
    body_text = resolve_decision_body(job.status, job.email_body)
    company = _escape(job.company_name)
    body = (
        f"<p>Hi {_escape(job.student_name)},</p>"
        f"<p>{company} has made a decision on your application for {_escape(job.job_title)}.</p>"
        f"<p>{_multiline(body_text)}</p>"
        f"<p>Thanks,<br />The {company} Team</p>"
    )
    return RenderedEmail(subject=f"Update on your application for {job.job_title}", html=_wrap(body))


def render_email(job) -> RenderedEmail:
    """Render subject and HTML for any email job variant."""
    match job:
        case WelcomeEmail():
            return _render_welcome(job)
        case NewApplicationEmail():
            return _render_new_application(job)
        case DecisionEmail():
            return _render_decision(job)
        case _:
            raise TypeError(f"Unknown email job: {type(job).__name__}")
