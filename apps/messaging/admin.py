# apps/messaging/admin.py
from django.contrib import admin
from .models import ChatMessage


@admin.register(ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ("id", "sender_id", "receiver_id", "job_id", "short_body", "read", "created_at")
    list_filter = ("read", "created_at")
    search_fields = ("body",)
    ordering = ("-created_at",)

    # The log is append-only; the admin is a read-only window onto it
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def short_body(self, obj):
        return obj.body[:50]
    short_body.short_description = "Message"
