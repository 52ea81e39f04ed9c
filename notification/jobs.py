#!/usr/bin/env python3
"""
Email job payloads.

Each job on the email queue is one variant of a tagged union keyed by
`type`. Payloads are validated when enqueued and again when consumed, so
a malformed job fails fast on either side.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _EmailJobBase(BaseModel):
    model_config = ConfigDict(extra='forbid')


class WelcomeEmail(_EmailJobBase):
    type: Literal['welcome'] = 'welcome'
    email: str
    full_name: Optional[str] = None
    role: Literal['student', 'startup']

    @property
    def recipient(self) -> str:
        return self.email


class NewApplicationEmail(_EmailJobBase):
    type: Literal['new-application'] = 'new-application'
    company_email: str
    company_name: str
    applicant_name: str
    job_title: str
    score: int = Field(ge=0, le=100)

    @property
    def recipient(self) -> str:
        return self.company_email


class DecisionEmail(_EmailJobBase):
    type: Literal['decision'] = 'decision'
    student_email: str
    student_name: str
    job_title: str
    company_name: str
    status: Literal['accepted', 'rejected']
    email_body: Optional[str] = None

    @property
    def recipient(self) -> str:
        return self.student_email


EmailJob = Annotated[
    Union[WelcomeEmail, NewApplicationEmail, DecisionEmail],
    Field(discriminator='type'),
]

_email_job_adapter = TypeAdapter(EmailJob)


def parse_email_job(data) -> Union[WelcomeEmail, NewApplicationEmail, DecisionEmail]:
    """Validate a raw payload (dict) into its email job variant."""
    return _email_job_adapter.validate_python(data)
