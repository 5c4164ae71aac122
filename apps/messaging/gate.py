# apps/messaging/gate.py
"""
Initiation gate: who may send the next message in a relationship.

A relationship is a pair of users, optionally scoped to one job. Nothing
is stored for it; every check is a fresh query over the message log, so
once a reply-only party is allowed to answer it stays allowed.
"""
import logging
from dataclasses import dataclass

from apps.jobs import directory as job_directory
from apps.users.models import User

from .exceptions import AuthorizationError
from .log import for_job, message_log

logger = logging.getLogger(__name__)

AWAIT_INITIATION = 'await_initiation'
NO_APPLICATION = 'no_application'

REASON_MESSAGES = {
    AWAIT_INITIATION: (
        'You can only reply to messages. '
        'Please wait for the employer to start the conversation.'
    ),
    NO_APPLICATION: 'You can only chat about jobs you have applied for.',
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None
    message: str = ''

    def __bool__(self):
        return self.allowed


class InitiatorPolicy:
    """May open a conversation with anyone."""

    def can_send(self, sender_id, receiver_id, job_id=None):
        return Decision(True, message='You can send messages')


class ReplyOnlyPolicy:
    """May only answer once the counterpart has written in this relationship."""

    def __init__(self, log=message_log):
        self.log = log

    def can_send(self, sender_id, receiver_id, job_id=None):
        has_inbound = self.log.exists(
            for_job(job_id),
            sender_id=receiver_id,
            receiver_id=sender_id,
        )
        if not has_inbound:
            return Decision(False, AWAIT_INITIATION, REASON_MESSAGES[AWAIT_INITIATION])

        # Job-scoped replies must be backed by the sender's own application
        if job_id is not None and not job_directory.application_exists(job_id, sender_id):
            return Decision(False, NO_APPLICATION, REASON_MESSAGES[NO_APPLICATION])

        return Decision(True, message='You can reply to this conversation')


POLICIES = {
    User.Role.EMPLOYER: InitiatorPolicy(),
    User.Role.ADMIN: InitiatorPolicy(),
    User.Role.JOBSEEKER: ReplyOnlyPolicy(),
}


def policy_for(role):
    try:
        return POLICIES[User.Role(role)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown role: {role!r}") from None


def can_send(sender_id, sender_role, receiver_id, job_id=None):
    return policy_for(sender_role).can_send(sender_id, receiver_id, job_id)


def authorize(sender_id, sender_role, receiver_id, job_id=None):
    """Like can_send() but raises AuthorizationError on denial."""
    decision = can_send(sender_id, sender_role, receiver_id, job_id)
    if not decision:
        logger.info(
            "Gate denied %s (%s) → %s job=%s: %s",
            sender_id, sender_role, receiver_id, job_id, decision.reason,
        )
        raise AuthorizationError(decision.message, code=decision.reason)
    return decision
