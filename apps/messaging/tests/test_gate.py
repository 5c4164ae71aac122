"""
Tests for the initiation gate.

Employers and admins may always write. Jobseekers may only answer once the
other side has written to them in the same relationship, and job-scoped
answers also need their own application to that job.
"""

import pytest

from apps.messaging import gate
from apps.messaging.exceptions import AuthorizationError
from apps.messaging.tests.factories import ApplicationFactory, MessageFactory
from apps.users.models import User


class TestPolicyFor:
    @pytest.mark.parametrize("role", [User.Role.EMPLOYER, User.Role.ADMIN, "employer", "admin"])
    def test_initiator_roles(self, role):
        assert isinstance(gate.policy_for(role), gate.InitiatorPolicy)

    def test_jobseeker_is_reply_only(self):
        assert isinstance(gate.policy_for("jobseeker"), gate.ReplyOnlyPolicy)

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            gate.policy_for("recruiter")


@pytest.mark.django_db
class TestInitiator:
    def test_employer_can_always_send(self, employer, jobseeker, job):
        decision = gate.can_send(employer.id, employer.role, jobseeker.id, job.id)

        assert decision.allowed is True
        assert decision.reason is None
        assert decision.message == "You can send messages"

    def test_employer_needs_no_application_for_job(self, employer, jobseeker, job):
        assert gate.can_send(employer.id, employer.role, jobseeker.id, job.id)

    def test_admin_can_always_send(self, admin_user, jobseeker):
        assert gate.can_send(admin_user.id, admin_user.role, jobseeker.id)


@pytest.mark.django_db
class TestReplyOnly:
    def test_denied_without_inbound_message(self, employer, jobseeker):
        decision = gate.can_send(jobseeker.id, jobseeker.role, employer.id)

        assert decision.allowed is False
        assert decision.reason == gate.AWAIT_INITIATION
        assert "wait for the employer" in decision.message

    def test_own_outbound_message_does_not_count(self, employer, jobseeker):
        MessageFactory(sender=jobseeker, receiver=employer)

        assert not gate.can_send(jobseeker.id, jobseeker.role, employer.id)

    def test_allowed_after_counterpart_writes(self, employer, jobseeker):
        MessageFactory(sender=employer, receiver=jobseeker)

        decision = gate.can_send(jobseeker.id, jobseeker.role, employer.id)

        assert decision.allowed is True
        assert decision.message == "You can reply to this conversation"

    def test_message_from_someone_else_does_not_count(self, employer, jobseeker, other_jobseeker):
        MessageFactory(sender=employer, receiver=other_jobseeker)

        assert not gate.can_send(jobseeker.id, jobseeker.role, employer.id)

    def test_job_scope_must_match(self, employer, jobseeker, job, other_job):
        ApplicationFactory(job=job, user=jobseeker)
        ApplicationFactory(job=other_job, user=jobseeker)
        MessageFactory(sender=employer, receiver=jobseeker, job=job)

        assert gate.can_send(jobseeker.id, jobseeker.role, employer.id, job.id)
        decision = gate.can_send(jobseeker.id, jobseeker.role, employer.id, other_job.id)
        assert decision.reason == gate.AWAIT_INITIATION

    def test_job_message_unlocks_unscoped_reply(self, employer, jobseeker, job):
        MessageFactory(sender=employer, receiver=jobseeker, job=job)

        assert gate.can_send(jobseeker.id, jobseeker.role, employer.id)

    def test_job_scoped_reply_needs_application(self, employer, jobseeker, job):
        MessageFactory(sender=employer, receiver=jobseeker, job=job)

        decision = gate.can_send(jobseeker.id, jobseeker.role, employer.id, job.id)

        assert decision.allowed is False
        assert decision.reason == gate.NO_APPLICATION
        assert decision.message == "You can only chat about jobs you have applied for."

    def test_prior_message_check_runs_first(self, employer, jobseeker, job):
        decision = gate.can_send(jobseeker.id, jobseeker.role, employer.id, job.id)

        assert decision.reason == gate.AWAIT_INITIATION

    def test_someone_elses_application_does_not_count(self, employer, jobseeker, other_jobseeker, job):
        ApplicationFactory(job=job, user=other_jobseeker)
        MessageFactory(sender=employer, receiver=jobseeker, job=job)

        decision = gate.can_send(jobseeker.id, jobseeker.role, employer.id, job.id)

        assert decision.reason == gate.NO_APPLICATION

    def test_permission_is_monotonic(self, employer, jobseeker, job, application):
        MessageFactory(sender=employer, receiver=jobseeker, job=job)
        assert gate.can_send(jobseeker.id, jobseeker.role, employer.id, job.id)

        MessageFactory(sender=jobseeker, receiver=employer, job=job)
        MessageFactory(sender=employer, receiver=jobseeker)
        MessageFactory(sender=jobseeker, receiver=employer)

        assert gate.can_send(jobseeker.id, jobseeker.role, employer.id, job.id)


@pytest.mark.django_db
class TestAuthorize:
    def test_raises_with_reason_code(self, employer, jobseeker):
        with pytest.raises(AuthorizationError) as excinfo:
            gate.authorize(jobseeker.id, jobseeker.role, employer.id)

        assert excinfo.value.code == gate.AWAIT_INITIATION
        assert excinfo.value.as_event() == {
            "error": gate.AWAIT_INITIATION,
            "message": gate.REASON_MESSAGES[gate.AWAIT_INITIATION],
        }

    def test_returns_decision_when_allowed(self, employer, jobseeker):
        decision = gate.authorize(employer.id, employer.role, jobseeker.id)

        assert decision.allowed is True
