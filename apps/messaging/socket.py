# apps/messaging/socket.py

import logging

import socketio
from channels.db import database_sync_to_async
from django.conf import settings
from django.utils import timezone

from apps.users.auth import resolve_credential
from apps.messaging import services
from apps.messaging.exceptions import AuthError, MessagingError
from apps.messaging.registry import ConnectionRegistry

logger = logging.getLogger(__name__)

# Global tracking: user_id → live sids
registry = ConnectionRegistry()

sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins=settings.SOCKETIO_CORS_ALLOWED_ORIGINS,
)


# --- Database helpers ---
authenticate = database_sync_to_async(resolve_credential)
store_message = database_sync_to_async(services.send_message)


async def emit_to_user(event, data, user_id):
    """Deliver an event to every live connection of one user."""
    sids = registry.connections(user_id)
    for target in sids:
        await sio.emit(event, data, to=target)
    return len(sids)


async def expire_connection(sid, expires_at):
    delay = (expires_at - timezone.now()).total_seconds()
    if delay > 0:
        await sio.sleep(delay)
    if registry.user_for(sid) is not None:
        logger.info("Token expired, dropping connection %s", sid)
        await sio.disconnect(sid)


# --- Socket.IO events ---
@sio.event
async def connect(sid, environ, auth):
    token = auth.get('token') if isinstance(auth, dict) else None

    try:
        identity = await authenticate(token)
    except AuthError as exc:
        logger.warning("Connection %s refused: %s", sid, exc.message)
        raise socketio.exceptions.ConnectionRefusedError(exc.as_event())

    await sio.save_session(sid, {'user_id': identity.user_id, 'role': identity.role})
    registry.add(identity.user_id, sid)

    if settings.SOCKETIO_ENFORCE_TOKEN_EXPIRY and identity.expires_at is not None:
        sio.start_background_task(expire_connection, sid, identity.expires_at)

    logger.info(
        "Connected: user %s (%s) on %s, %s live connections",
        identity.user_id, identity.role, sid, len(registry.connections(identity.user_id)),
    )
    return True


@sio.event
async def send_message(sid, data):
    if registry.user_for(sid) is None:
        return

    session = await sio.get_session(sid)

    try:
        receiver_id, payload = await store_message(session['user_id'], session['role'], data)
    except MessagingError as exc:
        logger.info("send_message from %s rejected: %s", session['user_id'], exc.code)
        await sio.emit('error', exc.as_event(), to=sid)
        return
    except Exception:
        logger.exception("send_message from %s failed", session['user_id'])
        await sio.emit('error', {'error': 'server_error', 'message': 'Could not send message'}, to=sid)
        return

    # Send to every connection of the receiver, then confirm to the sender
    await emit_to_user('receive_message', payload, receiver_id)
    await sio.emit('message_sent', payload, to=sid)


@sio.event
async def typing(sid, data):
    user_id = registry.user_for(sid)
    if user_id is None or not isinstance(data, dict):
        return

    receiver_id = data.get('receiverId')
    if not receiver_id:
        return

    await emit_to_user(
        'user_typing',
        {'userId': int(user_id), 'isTyping': bool(data.get('isTyping'))},
        receiver_id,
    )


@sio.event
async def disconnect(sid, reason=None):
    user_id = registry.remove(sid)
    logger.info(
        "Disconnected: user %s from %s (%s), %s connections open",
        user_id, sid, reason, len(registry),
    )
