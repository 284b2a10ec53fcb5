import functools
from typing import Any, Dict

from flask import current_app, request
from flask_socketio import emit

from wordbomb import socketio
from wordbomb.errors import GameRejection, InvalidRequest


def _coordinator():
    return current_app.extensions['wordbomb']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidRequest('payload must be an object')
    return data


def acknowledged(handler):
    """Turn rejections into failure acks for the requesting connection only."""
    @functools.wraps(handler)
    def wrapper(*args):
        try:
            return handler(*args)
        except GameRejection as exc:
            current_app.logger.info(f"[reject] event={handler.__name__} sid={_get_sid()} error={exc.code} message={exc}")
            return exc.to_dict()
    return wrapper


def handle_connect(auth=None):
    emit('connected', {'connectionId': _get_sid()})


def handle_disconnect(reason=None):
    sid = _get_sid()
    if _coordinator().disconnect(sid):
        current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")


@acknowledged
def handle_create_room(data=None):
    room = _coordinator().create_room(_get_sid())
    return {'success': True, 'pin': room.code, 'isHost': True}


@acknowledged
def handle_join_room(data=None):
    data = _payload(data)
    sid = _get_sid()
    room, player = _coordinator().join_room(sid, data.get('pin'), data.get('playerName'))
    return {
        'success': True,
        'player': player.to_dict(),
        'players': room.players_payload(),
        'isHost': room.is_host(sid),
        'gameState': room.phase.value,
    }


@acknowledged
def handle_start_game(data=None):
    data = _payload(data)
    _coordinator().start_game(_get_sid(), data.get('pin'))
    return {'success': True}


@acknowledged
def handle_submit_word(data=None):
    data = _payload(data)
    is_valid = _coordinator().submit_word(_get_sid(), data.get('pin'), data.get('word'))
    return {'success': True, 'isValid': is_valid}


@acknowledged
def handle_reset_game(data=None):
    data = _payload(data)
    _coordinator().reset_game(_get_sid(), data.get('pin'))
    return {'success': True}


@acknowledged
def handle_leave_room(data=None):
    _coordinator().disconnect(_get_sid())
    return {'success': True}


def handle_ping(data=None):
    emit('pong', data or {})


def handle_unexpected_error(exc):
    current_app.logger.exception(f"[socket-error] sid={_get_sid()} error={exc!r}")
    return {'success': False, 'error': 'InternalError', 'message': 'Unexpected server error'}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create-room', handle_create_room, namespace=namespace)
    socketio.on_event('join-room', handle_join_room, namespace=namespace)
    socketio.on_event('start-game', handle_start_game, namespace=namespace)
    socketio.on_event('submit-word', handle_submit_word, namespace=namespace)
    socketio.on_event('reset-game', handle_reset_game, namespace=namespace)
    socketio.on_event('leave-room', handle_leave_room, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
    socketio.on_error_default(handle_unexpected_error)
