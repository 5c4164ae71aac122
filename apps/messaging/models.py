# apps/messaging/models.py
from django.db import models
from django.contrib.auth import get_user_model

User = get_user_model()


class ChatMessage(models.Model):
    # References are kept without DB constraints so a thread survives a
    # deleted user, job or application; readers fall back to a null snapshot.
    sender = models.ForeignKey(
        User, on_delete=models.DO_NOTHING, db_constraint=False, related_name='sent_messages'
    )
    receiver = models.ForeignKey(
        User, on_delete=models.DO_NOTHING, db_constraint=False, related_name='received_messages'
    )
    body = models.TextField()
    job = models.ForeignKey(
        'jobs.Job', on_delete=models.DO_NOTHING, db_constraint=False,
        null=True, blank=True, related_name='messages'
    )
    application = models.ForeignKey(
        'jobs.Application', on_delete=models.DO_NOTHING, db_constraint=False,
        null=True, blank=True, related_name='messages'
    )
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['sender', 'receiver', '-created_at'], name='chat_pair_created_idx'),
            models.Index(fields=['job', 'application'], name='chat_job_application_idx'),
            models.Index(fields=['sender', 'receiver', 'job'], name='chat_pair_job_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(sender=models.F('receiver')),
                name='chat_message_distinct_parties',
            ),
        ]

    def __str__(self):
        return f"{self.sender_id} → {self.receiver_id}: {self.body[:30]}"

    def counterparty_id(self, observer_id):
        return self.receiver_id if self.sender_id == observer_id else self.sender_id
