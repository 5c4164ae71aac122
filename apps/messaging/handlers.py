# apps/messaging/handlers.py
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import MessagingError


def messaging_exception_handler(exc, context):
    """Render MessagingError like the rest of the chat API; defer otherwise."""
    if isinstance(exc, MessagingError):
        return Response(
            {"success": False, **exc.as_event()},
            status=exc.status_code,
        )
    return exception_handler(exc, context)
