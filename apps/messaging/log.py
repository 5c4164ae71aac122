# apps/messaging/log.py
from django.db.models import Q

from .exceptions import ValidationError
from .models import ChatMessage

ASCENDING = ('created_at', 'id')
DESCENDING = ('-created_at', '-id')


def involving(user_id):
    return Q(sender_id=user_id) | Q(receiver_id=user_id)


def between(user_id, other_id):
    return (
        Q(sender_id=user_id, receiver_id=other_id)
        | Q(sender_id=other_id, receiver_id=user_id)
    )


def for_job(job_id):
    """Scope to one job; no job means every thread between the parties."""
    return Q(job_id=job_id) if job_id is not None else Q()


class MessageLog:
    """
    Append-only store of chat messages.

    Rows are only ever created by append() and the only change allowed
    afterwards is the read flag going from False to True in mark_read().
    """

    def __init__(self, queryset=None):
        self.queryset = queryset if queryset is not None else ChatMessage.objects.all()

    def append(self, sender_id, receiver_id, body, job_id=None, application_id=None):
        if not sender_id:
            raise ValidationError("Sender ID is required")
        if not receiver_id:
            raise ValidationError("Receiver ID is required")
        if str(sender_id) == str(receiver_id):
            raise ValidationError("You cannot send a message to yourself")

        body = (body or '').strip()
        if not body:
            raise ValidationError("Message is required")

        return ChatMessage.objects.create(
            sender_id=sender_id,
            receiver_id=receiver_id,
            body=body,
            job_id=job_id,
            application_id=application_id,
        )

    def find(self, *conditions, descending=False, **lookups):
        """Lazy, ordered QuerySet of messages matching every condition."""
        order = DESCENDING if descending else ASCENDING
        return self.queryset.filter(*conditions, **lookups).order_by(*order)

    def exists(self, *conditions, **lookups):
        return self.queryset.filter(*conditions, **lookups).exists()

    def thread(self, user_id, other_id, job_id=None):
        return self.find(between(user_id, other_id), for_job(job_id))

    def mark_read(self, sender_id, receiver_id, job_id=None):
        """
        Flip unread messages from sender_id to receiver_id.

        receiver_id is the caller; rows the caller sent are never touched.
        Returns the number of rows flipped.
        """
        return self.queryset.filter(
            for_job(job_id),
            sender_id=sender_id,
            receiver_id=receiver_id,
            read=False,
        ).update(read=True)


message_log = MessageLog()
