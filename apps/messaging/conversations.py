# apps/messaging/conversations.py
"""
Conversation summaries derived from the message log.

Nothing here is stored. A conversation is the set of messages between an
observer and one counterparty, scoped to one job (or to no job), and is
rebuilt from the log on every query:

    messages involving observer, newest first
        → group by (counterparty_id, job_id)
        → first message seen in a group is its last_message
        → unread_count counts inbound messages still unread

Two threads between the same people about different jobs are never merged.
"""
from dataclasses import dataclass

from apps.jobs import directory as job_directory
from apps.users import directory as user_directory

from .log import for_job, involving, message_log
from .models import ChatMessage


@dataclass
class Conversation:
    owner_id: int
    other_party_id: int
    job_id: int | None
    other_party: dict | None = None
    job: dict | None = None
    last_message: ChatMessage | None = None
    unread_count: int = 0
    application: dict | None = None

    @property
    def key(self):
        return (self.other_party_id, self.job_id)


@dataclass
class _Group:
    last_message: ChatMessage
    unread_count: int = 0


def group_messages(observer_id, messages):
    """
    Partition messages (already newest first) by (counterparty_id, job_id).

    Returns a dict in first-seen order, which is most-recent-first.
    """
    groups = {}
    for message in messages:
        key = (message.counterparty_id(observer_id), message.job_id)
        group = groups.get(key)
        if group is None:
            group = groups[key] = _Group(last_message=message)
        if message.receiver_id == observer_id and not message.read:
            group.unread_count += 1
    return groups


def _job_summary(snapshot):
    if snapshot is None:
        return None
    return {"id": snapshot["id"], "title": snapshot["title"]}


def _application_summary(row):
    return {
        "id": row["application_id"],
        "status": row["status"],
        "created_at": row["created_at"],
    }


def _recency(conversation):
    if conversation.last_message is not None:
        return conversation.last_message.created_at
    return conversation.application["created_at"]


def list_conversations(observer_id, job_id=None, log=message_log):
    """Every conversation the observer takes part in, most recent first."""
    messages = log.find(involving(observer_id), for_job(job_id), descending=True)
    groups = group_messages(observer_id, messages.iterator())

    users = user_directory.get_snapshots(other_id for other_id, _ in groups)
    jobs = job_directory.get_job_snapshots(job for _, job in groups)

    conversations = [
        Conversation(
            owner_id=observer_id,
            other_party_id=other_id,
            job_id=job,
            other_party=users.get(other_id),
            job=_job_summary(jobs.get(job)),
            last_message=group.last_message,
            unread_count=group.unread_count,
        )
        for (other_id, job), group in groups.items()
    ]
    # Stable sort keeps grouping order for equal timestamps
    conversations.sort(key=lambda c: c.last_message.created_at, reverse=True)
    return conversations


def list_job_conversations(owner_id, job_id, log=message_log):
    """
    One conversation per applicant of a job, messages or not.

    Applicants nobody has written to yet appear with last_message=None
    and sort by when they applied.
    """
    applicants = job_directory.list_applicants(job_id)
    job = _job_summary(job_directory.get_job_snapshot(job_id))

    messages = log.find(involving(owner_id), for_job(job_id), descending=True)
    groups = group_messages(owner_id, messages.iterator())
    users = user_directory.get_snapshots(row["user_id"] for row in applicants)

    conversations = []
    for row in applicants:
        group = groups.get((row["user_id"], job_id))
        conversations.append(Conversation(
            owner_id=owner_id,
            other_party_id=row["user_id"],
            job_id=job_id,
            other_party=users.get(row["user_id"]),
            job=job,
            last_message=group.last_message if group else None,
            unread_count=group.unread_count if group else 0,
            application=_application_summary(row),
        ))

    conversations.sort(key=_recency, reverse=True)
    return conversations


def list_application_conversations(applicant_id, log=message_log):
    """A jobseeker's view: one conversation per application, with the employer."""
    rows = job_directory.list_applications_for(applicant_id)

    messages = log.find(involving(applicant_id), descending=True)
    groups = group_messages(applicant_id, messages.iterator())
    users = user_directory.get_snapshots(row["employer_id"] for row in rows)
    jobs = job_directory.get_job_snapshots(row["job_id"] for row in rows)

    conversations = []
    for row in rows:
        group = groups.get((row["employer_id"], row["job_id"]))
        conversations.append(Conversation(
            owner_id=applicant_id,
            other_party_id=row["employer_id"],
            job_id=row["job_id"],
            other_party=users.get(row["employer_id"]),
            job=_job_summary(jobs.get(row["job_id"])),
            last_message=group.last_message if group else None,
            unread_count=group.unread_count if group else 0,
            application=_application_summary(row),
        ))

    conversations.sort(key=_recency, reverse=True)
    return conversations
