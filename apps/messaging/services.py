# apps/messaging/services.py
"""
Synchronous chat operations shared by the socket gateway and the HTTP views.

The socket layer runs these through database_sync_to_async; the views call
them directly.
"""
import logging

from apps.jobs import directory as job_directory
from apps.users import directory as user_directory

from . import gate
from .exceptions import NotFoundError, ValidationError
from .log import message_log
from .serializers import ChatMessageSerializer, snapshot_context

logger = logging.getLogger(__name__)


def _as_id(value, label):
    if value is None or value == '':
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise ValidationError(f"Invalid {label}")


def parse_send_request(data):
    """
    Normalise a send_message payload.

    Accepts camelCase keys from the browser client and snake_case keys
    from other callers.
    """
    if not isinstance(data, dict):
        raise ValidationError("Invalid data")

    receiver_id = _as_id(data.get('receiverId', data.get('receiver_id')), "receiver ID")
    if receiver_id is None:
        raise ValidationError("Receiver ID is required")

    body = data.get('message', data.get('body')) or ''
    if not isinstance(body, str) or not body.strip():
        raise ValidationError("Message is required")

    return {
        "receiver_id": receiver_id,
        "body": body.strip(),
        "job_id": _as_id(data.get('jobId', data.get('job_id')), "job ID"),
        "application_id": _as_id(data.get('applicationId', data.get('application_id')), "application ID"),
    }


def send_message(sender_id, sender_role, data, log=message_log):
    """
    Validate, authorize and persist one message.

    Returns (receiver_id, payload) where payload is the denormalized message
    to deliver. Every check runs before the append, so a failure never
    leaves a row behind.
    """
    request = parse_send_request(data)
    receiver_id = request["receiver_id"]
    job_id = request["job_id"]

    if receiver_id == sender_id:
        raise ValidationError("You cannot send a message to yourself")
    if user_directory.get_snapshot(receiver_id) is None:
        raise NotFoundError("User not found")

    gate.authorize(sender_id, sender_role, receiver_id, job_id)

    if job_id is not None and job_directory.get_job_snapshot(job_id) is None:
        raise NotFoundError("Job not found")

    message = log.append(
        sender_id=sender_id,
        receiver_id=receiver_id,
        body=request["body"],
        job_id=job_id,
        application_id=request["application_id"],
    )
    logger.info("Message %s stored: %s → %s job=%s", message.id, sender_id, receiver_id, job_id)

    try:
        payload = ChatMessageSerializer(message, context=snapshot_context([message])).data
    except Exception:
        logger.exception("Could not render message %s, delivering bare fields", message.id)
        payload = bare_payload(message)
    return receiver_id, payload


def bare_payload(message):
    """Message payload without directory lookups; party names are left empty."""
    return {
        "id": message.id,
        "sender": {"id": message.sender_id, "name": None, "email": None},
        "receiver": {"id": message.receiver_id, "name": None, "email": None},
        "body": message.body,
        "job": {"id": message.job_id, "title": None} if message.job_id is not None else None,
        "application_id": message.application_id,
        "read": message.read,
        "created_at": message.created_at.isoformat(),
    }


def fetch_thread(observer_id, counterparty_id, job_id=None, log=message_log):
    """
    Full history between observer and counterparty, oldest first.

    Inbound messages are marked read after the response is captured, so
    the returned rows still carry their unread state.
    """
    messages = list(log.thread(observer_id, counterparty_id, job_id))
    data = ChatMessageSerializer(messages, many=True, context=snapshot_context(messages)).data

    flipped = log.mark_read(sender_id=counterparty_id, receiver_id=observer_id, job_id=job_id)
    if flipped:
        logger.debug("Marked %s messages read for %s from %s", flipped, observer_id, counterparty_id)
    return data
