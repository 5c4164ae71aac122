# apps/messaging/registry.py


class ConnectionRegistry:
    """
    Live socket connections per user.

    One user may hold several connections at once (tabs, devices). Only
    touched from the event loop, so no locking.
    """

    def __init__(self):
        self._users = {}    # sid → user_id
        self._sockets = {}  # user_id → set of sids

    def add(self, user_id, sid):
        user_id = str(user_id)
        self._users[sid] = user_id
        self._sockets.setdefault(user_id, set()).add(sid)

    def remove(self, sid):
        user_id = self._users.pop(sid, None)
        if user_id is None:
            return None
        sockets = self._sockets.get(user_id)
        if sockets is not None:
            sockets.discard(sid)
            if not sockets:
                del self._sockets[user_id]
        return user_id

    def connections(self, user_id):
        return frozenset(self._sockets.get(str(user_id), ()))

    def user_for(self, sid):
        return self._users.get(sid)

    def is_online(self, user_id):
        return bool(self._sockets.get(str(user_id)))

    def clear(self):
        self._users.clear()
        self._sockets.clear()

    def __len__(self):
        return len(self._users)
