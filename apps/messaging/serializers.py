# apps/messaging/serializers.py

from rest_framework import serializers

from apps.jobs import directory as job_directory
from apps.users import directory as user_directory

from .models import ChatMessage


def snapshot_context(messages, **extra):
    """Bulk-load the user and job snapshots a batch of messages refers to."""
    messages = [message for message in messages if message is not None]
    user_ids = set()
    job_ids = set()
    for message in messages:
        user_ids.update((message.sender_id, message.receiver_id))
        if message.job_id is not None:
            job_ids.add(message.job_id)
    context = {
        "users": user_directory.get_snapshots(user_ids),
        "jobs": job_directory.get_job_snapshots(job_ids),
    }
    context.update(extra)
    return context


class ChatMessageSerializer(serializers.ModelSerializer):
    """Message with sender, receiver and job snapshots embedded."""

    sender = serializers.SerializerMethodField()
    receiver = serializers.SerializerMethodField()
    job = serializers.SerializerMethodField()
    application_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = ChatMessage
        fields = (
            'id',
            'sender',
            'receiver',
            'body',
            'job',
            'application_id',
            'read',
            'created_at',
        )

    def _user(self, user_id):
        snapshot = self.context.get("users", {}).get(user_id)
        if snapshot is None:
            return {"id": user_id, "name": None, "email": None}
        return {"id": user_id, "name": snapshot["name"], "email": snapshot["email"]}

    def get_sender(self, obj):
        return self._user(obj.sender_id)

    def get_receiver(self, obj):
        return self._user(obj.receiver_id)

    def get_job(self, obj):
        if obj.job_id is None:
            return None
        snapshot = self.context.get("jobs", {}).get(obj.job_id)
        if snapshot is None:
            return {"id": obj.job_id, "title": None}
        return {"id": snapshot["id"], "title": snapshot["title"]}


class ConversationSerializer(serializers.Serializer):
    user = serializers.DictField(source='other_party', allow_null=True)
    job = serializers.DictField(allow_null=True)
    application = serializers.SerializerMethodField()
    last_message = serializers.SerializerMethodField()
    unread_count = serializers.IntegerField()

    def get_application(self, obj):
        if obj.application is None:
            return None
        return {
            "id": obj.application["id"],
            "status": obj.application["status"],
            "created_at": obj.application["created_at"].isoformat(),
        }

    def get_last_message(self, obj):
        if obj.last_message is None:
            return None
        return ChatMessageSerializer(obj.last_message, context=self.context).data

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if instance.application is None:
            data.pop('application')
        return data
