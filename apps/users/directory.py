# apps/users/directory.py
from django.contrib.auth import get_user_model

User = get_user_model()

SNAPSHOT_FIELDS = ("id", "name", "email", "role")


def get_snapshot(user_id):
    """Return {id, name, email, role} for a user, or None if they are gone."""
    if user_id is None:
        return None
    user = User.objects.filter(id=user_id).only(*SNAPSHOT_FIELDS).first()
    return user.snapshot() if user else None


def get_snapshots(user_ids):
    ids = {user_id for user_id in user_ids if user_id is not None}
    if not ids:
        return {}
    users = User.objects.filter(id__in=ids).only(*SNAPSHOT_FIELDS)
    return {user.id: user.snapshot() for user in users}
