"""
Tests for the message log.

Covers:
- append() validation and trimming
- find() ordering and the involving/between/for_job predicates
- mark_read() scoping: only inbound, only unread, optionally per job
"""

import pytest

from apps.messaging.exceptions import ValidationError
from apps.messaging.log import between, for_job, involving, message_log
from apps.messaging.models import ChatMessage
from apps.messaging.tests.factories import MessageFactory


@pytest.mark.django_db
class TestAppend:
    def test_creates_unread_message(self, employer, jobseeker, job, application):
        message = message_log.append(
            employer.id, jobseeker.id, "Hello", job_id=job.id, application_id=application.id
        )

        assert message.pk is not None
        assert message.sender_id == employer.id
        assert message.receiver_id == jobseeker.id
        assert message.job_id == job.id
        assert message.application_id == application.id
        assert message.read is False
        assert message.created_at is not None

    def test_body_is_trimmed(self, employer, jobseeker):
        message = message_log.append(employer.id, jobseeker.id, "   Hello there  \n")

        assert message.body == "Hello there"

    def test_job_is_optional(self, employer, jobseeker):
        message = message_log.append(employer.id, jobseeker.id, "Hi")

        assert message.job_id is None
        assert message.application_id is None

    @pytest.mark.parametrize("body", ["", "   ", "\n\t", None])
    def test_rejects_empty_body(self, employer, jobseeker, body):
        with pytest.raises(ValidationError):
            message_log.append(employer.id, jobseeker.id, body)

        assert ChatMessage.objects.count() == 0

    def test_rejects_missing_sender(self, jobseeker):
        with pytest.raises(ValidationError, match="Sender"):
            message_log.append(None, jobseeker.id, "Hello")

    def test_rejects_missing_receiver(self, employer):
        with pytest.raises(ValidationError, match="Receiver"):
            message_log.append(employer.id, None, "Hello")

    def test_rejects_message_to_self(self, employer):
        with pytest.raises(ValidationError):
            message_log.append(employer.id, employer.id, "Note to self")

        assert ChatMessage.objects.count() == 0


@pytest.mark.django_db
class TestFind:
    def test_ascending_by_default(self, employer, jobseeker):
        first = MessageFactory(sender=employer, receiver=jobseeker)
        second = MessageFactory(sender=jobseeker, receiver=employer)
        third = MessageFactory(sender=employer, receiver=jobseeker)

        found = list(message_log.find(between(employer.id, jobseeker.id)))

        assert found == [first, second, third]

    def test_descending(self, employer, jobseeker):
        first = MessageFactory(sender=employer, receiver=jobseeker)
        second = MessageFactory(sender=employer, receiver=jobseeker)

        found = list(message_log.find(between(employer.id, jobseeker.id), descending=True))

        assert found == [second, first]

    def test_same_timestamp_falls_back_to_id(self, employer, jobseeker):
        first = MessageFactory(sender=employer, receiver=jobseeker)
        second = MessageFactory(sender=employer, receiver=jobseeker)
        ChatMessage.objects.update(created_at=first.created_at)

        assert list(message_log.find(involving(employer.id))) == [first, second]
        assert list(message_log.find(involving(employer.id), descending=True)) == [second, first]

    def test_involving_matches_either_endpoint(self, employer, jobseeker, other_jobseeker):
        sent = MessageFactory(sender=employer, receiver=jobseeker)
        received = MessageFactory(sender=jobseeker, receiver=employer)
        MessageFactory(sender=other_jobseeker, receiver=jobseeker)

        assert set(message_log.find(involving(employer.id))) == {sent, received}

    def test_for_job_filters_only_when_given(self, employer, jobseeker, job, other_job):
        on_job = MessageFactory(sender=employer, receiver=jobseeker, job=job)
        on_other = MessageFactory(sender=employer, receiver=jobseeker, job=other_job)
        no_job = MessageFactory(sender=employer, receiver=jobseeker)

        assert list(message_log.find(for_job(job.id))) == [on_job]
        assert list(message_log.find(for_job(None))) == [on_job, on_other, no_job]

    def test_find_is_lazy(self, employer, jobseeker, django_assert_num_queries):
        with django_assert_num_queries(0):
            queryset = message_log.find(involving(employer.id))

        MessageFactory(sender=employer, receiver=jobseeker)
        assert queryset.count() == 1

    def test_thread_is_both_directions(self, employer, jobseeker, other_jobseeker):
        a = MessageFactory(sender=employer, receiver=jobseeker)
        b = MessageFactory(sender=jobseeker, receiver=employer)
        MessageFactory(sender=employer, receiver=other_jobseeker)

        assert list(message_log.thread(jobseeker.id, employer.id)) == [a, b]


@pytest.mark.django_db
class TestMarkRead:
    def test_flips_only_inbound_unread(self, employer, jobseeker):
        inbound = MessageFactory(sender=employer, receiver=jobseeker)
        outbound = MessageFactory(sender=jobseeker, receiver=employer)

        flipped = message_log.mark_read(sender_id=employer.id, receiver_id=jobseeker.id)

        assert flipped == 1
        inbound.refresh_from_db()
        outbound.refresh_from_db()
        assert inbound.read is True
        assert outbound.read is False

    def test_counts_only_rows_that_changed(self, employer, jobseeker):
        MessageFactory(sender=employer, receiver=jobseeker, read=True)
        MessageFactory(sender=employer, receiver=jobseeker)

        assert message_log.mark_read(employer.id, jobseeker.id) == 1
        assert message_log.mark_read(employer.id, jobseeker.id) == 0

    def test_job_scoped(self, employer, jobseeker, job, other_job):
        on_job = MessageFactory(sender=employer, receiver=jobseeker, job=job)
        on_other = MessageFactory(sender=employer, receiver=jobseeker, job=other_job)

        message_log.mark_read(employer.id, jobseeker.id, job_id=job.id)

        on_job.refresh_from_db()
        on_other.refresh_from_db()
        assert on_job.read is True
        assert on_other.read is False

    def test_read_never_reverts(self, employer, jobseeker):
        message = MessageFactory(sender=employer, receiver=jobseeker)

        message_log.mark_read(employer.id, jobseeker.id)
        message_log.mark_read(employer.id, jobseeker.id)
        message_log.append(employer.id, jobseeker.id, "Another")

        message.refresh_from_db()
        assert message.read is True
