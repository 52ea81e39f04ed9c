#!/usr/bin/env python3
"""
Unit tests for the submission and decision handlers.
"""

import uuid
from unittest.mock import Mock

import pytest

from core.config_loader import ApplicationsConfig
from database.repositories import DecisionContext
from database.repositories.application import ApplicationRepository
from web.backend.dependencies import CurrentUser
from web.backend.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from web.backend.services.application_service import (
    ApplicationService,
    is_transition_allowed,
    should_send_decision_email,
)
from tests.mocks.launchpad_mocks import (
    count_applications,
    enable_decision_emails,
    load_application,
    make_breakdown,
    seed_application,
    seed_job,
    seed_startup,
    seed_student,
)


def _user(user_id, role, email="someone@example.com"):
    return CurrentUser(id=user_id, email=email, role=role)


@pytest.fixture
def marketplace(database):
    startup_user, company_id = seed_startup(database)
    student_user, student_id = seed_student(database)
    job_id = seed_job(database, company_id)
    return {
        "startup": _user(startup_user, "startup", "founder@acme.io"),
        "company_id": company_id,
        "student": _user(student_user, "student", "ada@example.com"),
        "student_id": student_id,
        "job_id": job_id,
    }


@pytest.fixture
def deferred_queue(context):
    """Replace the inline scoring queue so applications stay in 'scoring'."""
    queue = Mock()
    context.scoring_queue = queue
    return queue


class TestTransitionPolicy:

    @pytest.mark.parametrize("current", ["pending", "scoring", "reviewing", "accepted", "rejected"])
    @pytest.mark.parametrize("new", ["pending", "scoring", "reviewing", "accepted", "rejected"])
    def test_permissive_allows_everything(self, current, new):
        assert is_transition_allowed("permissive", current, new)

    @pytest.mark.parametrize("current, new, allowed", [
        ("reviewing", "accepted", True),
        ("reviewing", "rejected", True),
        ("scoring", "accepted", True),
        ("reviewing", "scoring", True),
        ("pending", "reviewing", True),
        ("accepted", "rejected", False),
        ("rejected", "accepted", False),
        ("accepted", "scoring", False),
        ("accepted", "accepted", True),
    ])
    def test_strict_makes_decisions_final(self, current, new, allowed):
        assert is_transition_allowed("strict", current, new) is allowed


class TestShouldSendDecisionEmail:

    def _context(self, email_on_decision=True, student_email="ada@example.com"):
        return DecisionContext(
            application_id=uuid.uuid4(), status="reviewing", job_id=None, job_title="Intern",
            company_id=None, company_name="Acme", company_owner_id=None,
            student_email=student_email, student_name="Ada",
            email_on_decision=email_on_decision,
            acceptance_email_body=None, rejection_email_body=None,
        )

    @pytest.mark.parametrize("previous, new, enabled, email, expected", [
        ("reviewing", "accepted", True, "ada@example.com", True),
        ("reviewing", "rejected", True, "ada@example.com", True),
        ("accepted", "rejected", True, "ada@example.com", True),
        ("accepted", "accepted", True, "ada@example.com", False),
        ("reviewing", "accepted", False, "ada@example.com", False),
        ("reviewing", "accepted", True, None, False),
        ("reviewing", "accepted", True, "", False),
        ("reviewing", "pending", True, "ada@example.com", False),
        ("accepted", "reviewing", True, "ada@example.com", False),
    ])
    def test_matrix(self, previous, new, enabled, email, expected):
        context = self._context(email_on_decision=enabled, student_email=email)
        assert should_send_decision_email(previous, new, context) is expected


class TestSubmit:

    def test_creates_scoring_application_and_enqueues(self, context, database, marketplace, deferred_queue):
        record = ApplicationService(context).submit(
            marketplace["student"], str(marketplace["job_id"]), "Hire me"
        )

        assert record.status == "scoring"
        assert record.score is None
        assert record.score_breakdown is None
        assert record.cover_letter == "Hire me"
        assert record.job.title == "Backend Intern"
        deferred_queue.enqueue_application.assert_called_once_with(uuid.UUID(record.id))

        application = load_application(database, uuid.UUID(record.id))
        assert application.status == "scoring"
        assert application.score is None

    def test_inline_scoring_completes_in_sync_mode(self, context, database, marketplace, llm, channel):
        llm.breakdown = make_breakdown(80, 70, 90)

        record = ApplicationService(context).submit(marketplace["student"], str(marketplace["job_id"]))

        application = load_application(database, uuid.UUID(record.id))
        assert application.status == "reviewing"
        assert application.score == 80
        assert len(channel.sent_to("founder@acme.io")) == 1

    def test_second_application_conflicts(self, context, database, marketplace, deferred_queue):
        service = ApplicationService(context)
        service.submit(marketplace["student"], str(marketplace["job_id"]))

        with pytest.raises(ConflictError):
            service.submit(marketplace["student"], str(marketplace["job_id"]))

        assert count_applications(database) == 1
        assert deferred_queue.enqueue_application.call_count == 1

    def test_unique_constraint_race_is_a_conflict(self, context, database, marketplace, deferred_queue, monkeypatch):
        seed_application(database, marketplace["job_id"], marketplace["student_id"])
        # Simulate losing the race: the pre-check sees nothing
        monkeypatch.setattr(
            "database.repositories.application.ApplicationRepository.get_by_job_and_student",
            lambda self, job_id, student_id: None,
        )

        with pytest.raises(ConflictError):
            ApplicationService(context).submit(marketplace["student"], str(marketplace["job_id"]))

        assert count_applications(database) == 1
        deferred_queue.enqueue_application.assert_not_called()

    def test_startup_cannot_apply(self, context, marketplace, deferred_queue):
        with pytest.raises(ForbiddenError):
            ApplicationService(context).submit(marketplace["startup"], str(marketplace["job_id"]))

    def test_missing_job_id(self, context, marketplace):
        with pytest.raises(ValidationError):
            ApplicationService(context).submit(marketplace["student"], None)

    def test_malformed_job_id(self, context, marketplace):
        with pytest.raises(ValidationError):
            ApplicationService(context).submit(marketplace["student"], "job-42")

    def test_unknown_job(self, context, marketplace):
        with pytest.raises(NotFoundError):
            ApplicationService(context).submit(marketplace["student"], str(uuid.uuid4()))

    def test_student_without_profile(self, context, marketplace):
        stranger = _user(uuid.uuid4(), "student")
        with pytest.raises(NotFoundError):
            ApplicationService(context).submit(stranger, str(marketplace["job_id"]))

    def test_enqueue_failure_still_returns_record(self, context, database, marketplace, deferred_queue):
        deferred_queue.enqueue_application.side_effect = ConnectionError("redis down")

        record = ApplicationService(context).submit(marketplace["student"], str(marketplace["job_id"]))

        assert record.status == "scoring"
        assert load_application(database, uuid.UUID(record.id)).status == "scoring"

    def test_scoring_failure_in_sync_mode_leaves_scoring(self, context, database, marketplace, llm):
        llm.fail_scoring = True

        record = ApplicationService(context).submit(marketplace["student"], str(marketplace["job_id"]))

        application = load_application(database, uuid.UUID(record.id))
        assert application.status == "scoring"
        assert application.score is None


class TestDecide:

    @pytest.fixture
    def application_id(self, context, database, marketplace):
        application_id = seed_application(database, marketplace["job_id"], marketplace["student_id"])
        context.scoring_worker.process(application_id)
        return application_id

    def test_owner_accepts(self, context, database, marketplace, application_id):
        record = ApplicationService(context).decide(marketplace["startup"], application_id, "accepted")

        assert record.status == "accepted"
        assert record.score == 80
        assert load_application(database, application_id).status == "accepted"

    def test_foreign_startup_is_forbidden_without_change(self, context, database, application_id):
        other_user, _ = seed_startup(database, email="other@beta.io", company_name="Beta")

        with pytest.raises(ForbiddenError):
            ApplicationService(context).decide(_user(other_user, "startup"), application_id, "rejected")

        assert load_application(database, application_id).status == "reviewing"

    def test_student_is_forbidden(self, context, database, marketplace, application_id):
        with pytest.raises(ForbiddenError):
            ApplicationService(context).decide(marketplace["student"], application_id, "accepted")
        assert load_application(database, application_id).status == "reviewing"

    @pytest.mark.parametrize("status", [None, "", "hired"])
    def test_invalid_status(self, context, marketplace, application_id, status):
        with pytest.raises(ValidationError):
            ApplicationService(context).decide(marketplace["startup"], application_id, status)

    def test_unknown_application(self, context, marketplace):
        with pytest.raises(NotFoundError):
            ApplicationService(context).decide(marketplace["startup"], uuid.uuid4(), "accepted")

    def test_decision_email_sent_once_when_enabled(self, context, database, marketplace, channel, application_id):
        enable_decision_emails(database, marketplace["company_id"], acceptance_body="See you Monday!")
        service = ApplicationService(context)

        service.decide(marketplace["startup"], application_id, "accepted")
        service.decide(marketplace["startup"], application_id, "accepted")

        emails = channel.sent_to("ada@example.com")
        assert len(emails) == 1
        assert emails[0]["subject"] == "Update on your application for Backend Intern"
        assert "See you Monday!" in emails[0]["html"]

    def test_no_decision_email_when_disabled(self, context, marketplace, channel, application_id):
        ApplicationService(context).decide(marketplace["startup"], application_id, "rejected")
        assert channel.sent_to("ada@example.com") == []

    def test_blank_custom_body_uses_default(self, context, database, marketplace, channel, application_id):
        enable_decision_emails(database, marketplace["company_id"], rejection_body="  ")

        ApplicationService(context).decide(marketplace["startup"], application_id, "rejected")

        html = channel.sent_to("ada@example.com")[0]["html"]
        assert "Thank you for your interest in this position." in html

    def test_every_real_change_sends_an_email(self, context, database, marketplace, channel, application_id):
        enable_decision_emails(database, marketplace["company_id"])
        service = ApplicationService(context)

        for status in ("accepted", "rejected", "accepted"):
            service.decide(marketplace["startup"], application_id, status)

        assert len(channel.sent_to("ada@example.com")) == 3

    def test_email_failure_is_not_fatal(self, context, database, marketplace, application_id):
        enable_decision_emails(database, marketplace["company_id"])
        context.notification_service = Mock()
        context.notification_service.notify_decision.side_effect = ConnectionError("redis down")

        record = ApplicationService(context).decide(marketplace["startup"], application_id, "accepted")

        assert record.status == "accepted"
        assert load_application(database, application_id).status == "accepted"

    def test_strict_policy_rejects_reopening(self, context, database, marketplace, application_id):
        context.config = context.config.model_copy(
            update={"applications": ApplicationsConfig(transition_policy="strict")}
        )
        service = ApplicationService(context)
        service.decide(marketplace["startup"], application_id, "accepted")

        with pytest.raises(InvalidTransitionError):
            service.decide(marketplace["startup"], application_id, "rejected")

        assert load_application(database, application_id).status == "accepted"

    def test_permissive_policy_allows_reopening(self, context, database, marketplace, application_id):
        service = ApplicationService(context)
        service.decide(marketplace["startup"], application_id, "accepted")
        record = service.decide(marketplace["startup"], application_id, "reviewing")

        assert record.status == "reviewing"

    def test_rescore_clears_score_and_enqueues(self, context, database, marketplace, application_id, deferred_queue):
        record = ApplicationService(context).decide(marketplace["startup"], application_id, "scoring")

        assert record.status == "scoring"
        assert record.score is None
        assert record.score_breakdown is None
        deferred_queue.enqueue_application.assert_called_once_with(application_id)

        application = load_application(database, application_id)
        assert application.status == "scoring"
        assert application.score is None

    def test_rescore_runs_inline_in_sync_mode(self, context, database, marketplace, llm, application_id):
        llm.breakdown = make_breakdown(60, 60, 60)

        ApplicationService(context).decide(marketplace["startup"], application_id, "scoring")

        application = load_application(database, application_id)
        assert application.status == "reviewing"
        assert application.score == 60

    def _interleave_decision(self, monkeypatch, service, user, application_id, status):
        """Run a second decision between the first call's status read and its UPDATE."""
        original = ApplicationRepository.update_status
        calls = []

        def update_status(repo, *args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                service.decide(user, application_id, status)
            return original(repo, *args, **kwargs)

        monkeypatch.setattr(ApplicationRepository, "update_status", update_status)

    def test_concurrent_identical_decisions_send_one_email(
        self, context, database, marketplace, channel, application_id, monkeypatch
    ):
        enable_decision_emails(database, marketplace["company_id"])
        service = ApplicationService(context)
        self._interleave_decision(monkeypatch, service, marketplace["startup"], application_id, "accepted")

        record = service.decide(marketplace["startup"], application_id, "accepted")

        assert record.status == "accepted"
        assert load_application(database, application_id).status == "accepted"
        assert len(channel.sent_to("ada@example.com")) == 1

    def test_concurrent_conflicting_decision_is_rejected(
        self, context, database, marketplace, channel, application_id, monkeypatch
    ):
        enable_decision_emails(database, marketplace["company_id"])
        service = ApplicationService(context)
        self._interleave_decision(monkeypatch, service, marketplace["startup"], application_id, "rejected")

        with pytest.raises(ConflictError):
            service.decide(marketplace["startup"], application_id, "accepted")

        assert load_application(database, application_id).status == "rejected"
        emails = channel.sent_to("ada@example.com")
        assert len(emails) == 1
        assert "Thank you for your interest in this position." in emails[0]["html"]


class TestReads:

    def test_student_never_sees_score(self, context, database, marketplace):
        application_id = seed_application(database, marketplace["job_id"], marketplace["student_id"])
        context.scoring_worker.process(application_id)
        service = ApplicationService(context)

        listed = service.list_applications(marketplace["student"])
        detail = service.get_application(marketplace["student"], application_id)

        assert len(listed) == 1
        assert listed[0].status == "reviewing"
        assert listed[0].score is None
        assert listed[0].score_breakdown is None
        assert detail.score is None

    def test_startup_sees_score(self, context, database, marketplace):
        application_id = seed_application(database, marketplace["job_id"], marketplace["student_id"])
        context.scoring_worker.process(application_id)
        service = ApplicationService(context)

        listed = service.list_applications(marketplace["startup"])
        detail = service.get_application(marketplace["startup"], application_id)

        assert listed[0].score == 80
        assert listed[0].student.email == "ada@example.com"
        assert detail.score_breakdown["educationMatch"]["score"] == 90

    def test_other_student_is_forbidden(self, context, database, marketplace):
        application_id = seed_application(database, marketplace["job_id"], marketplace["student_id"])
        other_user, _ = seed_student(database, email="grace@example.com", full_name="Grace")

        with pytest.raises(ForbiddenError):
            ApplicationService(context).get_application(_user(other_user, "student"), application_id)

    def test_user_without_rows_gets_empty_list(self, context):
        assert ApplicationService(context).list_applications(_user(uuid.uuid4(), "startup")) == []
