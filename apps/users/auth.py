# apps/users/auth.py
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone

from django.contrib.auth import get_user_model
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from apps.messaging.exceptions import AuthError

User = get_user_model()


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: str
    blocked: bool
    expires_at: datetime | None = None


def resolve_credential(token):
    """
    Turn a SimpleJWT access token into an Identity.

    Raises AuthError for a missing, malformed or expired token, for an
    unknown or inactive user, and for blocked accounts.
    """
    if not token:
        raise AuthError("Authentication token is required")

    token = str(token).strip()
    for prefix in api_settings.AUTH_HEADER_TYPES:
        if token.startswith(f"{prefix} "):
            token = token[len(prefix) + 1:].strip()

    try:
        access = AccessToken(token)
        user_id = access[api_settings.USER_ID_CLAIM]
    except (TokenError, KeyError) as exc:
        raise AuthError("Invalid or expired token") from exc

    user = User.objects.filter(**{api_settings.USER_ID_FIELD: user_id}).first()
    if user is None or not user.is_active:
        raise AuthError("User not found")
    if user.is_blocked:
        raise AuthError("Your account has been blocked")

    expires_at = None
    exp = access.get("exp")
    if exp is not None:
        expires_at = datetime.fromtimestamp(exp, tz=dt_timezone.utc)

    return Identity(
        user_id=user.pk,
        role=user.role,
        blocked=user.is_blocked,
        expires_at=expires_at,
    )
