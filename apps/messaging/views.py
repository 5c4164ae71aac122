# apps/messaging/views.py
from rest_framework import generics, permissions
from rest_framework.response import Response

from apps.jobs import directory as job_directory
from apps.users.models import User

from . import conversations, gate, services
from .exceptions import AuthorizationError, NotFoundError, ValidationError
from .serializers import ConversationSerializer, snapshot_context


class IsJobSeeker(permissions.BasePermission):
    def has_permission(self, request, view):
        return (
            request.user.is_authenticated
            and request.user.role == User.Role.JOBSEEKER
        )


def job_id_param(request):
    value = request.query_params.get('jobId') or request.query_params.get('job_id')
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError("Invalid job ID") from None


def render_conversations(items):
    context = snapshot_context(item.last_message for item in items)
    return ConversationSerializer(items, many=True, context=context).data


# ========================================
# 1. INBOX (all conversations, optional job filter)
# ========================================
class InboxView(generics.GenericAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        items = conversations.list_conversations(request.user.id, job_id_param(request))
        return Response({"success": True, "conversations": render_conversations(items)})


# ========================================
# 2. THREAD (marks inbound messages read)
# ========================================
class ThreadView(generics.GenericAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, user_id):
        messages = services.fetch_thread(request.user.id, user_id, job_id_param(request))
        return Response({"success": True, "messages": messages})


# ========================================
# 3. JOB CONVERSATIONS (employer: every applicant)
# ========================================
class JobConversationsView(generics.GenericAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, job_id):
        job = job_directory.get_job_snapshot(job_id)
        if job is None:
            raise NotFoundError("Job not found")

        is_admin = request.user.role == User.Role.ADMIN
        if not is_admin and not job_directory.is_job_owned_by(request.user.id, job_id):
            raise AuthorizationError("Not authorized")

        items = conversations.list_job_conversations(request.user.id, job_id)
        return Response({"success": True, "conversations": render_conversations(items)})


# ========================================
# 4. MY APPLICATION CONVERSATIONS (jobseeker)
# ========================================
class ApplicationConversationsView(generics.GenericAPIView):
    permission_classes = [IsJobSeeker]

    def get(self, request):
        items = conversations.list_application_conversations(request.user.id)
        return Response({"success": True, "conversations": render_conversations(items)})


# ========================================
# 5. CAN SEND? (advisory; sends are checked again)
# ========================================
class CanSendView(generics.GenericAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, user_id):
        decision = gate.can_send(request.user.id, request.user.role, user_id, job_id_param(request))
        return Response({
            "success": True,
            "canSend": decision.allowed,
            "reason": decision.reason,
            "message": decision.message,
        })
