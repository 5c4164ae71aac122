# apps/messaging/exceptions.py
from rest_framework import status


class MessagingError(Exception):
    """Base class for failures reported back to a chat client."""

    code = "messaging_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Something went wrong"

    def __init__(self, message=None, code=None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)

    def as_event(self):
        return {"error": self.code, "message": self.message}


class ValidationError(MessagingError):
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid data"


class AuthError(MessagingError):
    code = "auth_error"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication error"


class AuthorizationError(MessagingError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class NotFoundError(MessagingError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"
