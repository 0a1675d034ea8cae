from flask_socketio import join_room, leave_room, emit
from clubmate import socketio


def tournament_room(tournament_id) -> str:
    return f"tournament:{tournament_id}"


def broadcast_tournament_update(tournament_id, event: str, **payload) -> None:
    """Tell every client watching a tournament that something changed.

    Clients re-fetch standings/pairings on receipt; the payload only says what
    happened.
    """
    data = {'tournament_id': tournament_id, 'event': event}
    data.update(payload)
    socketio.emit('tournament_update', data, to=tournament_room(tournament_id), namespace='/ws')


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def _tournament_id(data):
    raw = (data or {}).get('tournament_id')
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def handle_join_tournament(data):
    tournament_id = _tournament_id(data)
    if tournament_id is None:
        emit('error', {'message': 'tournament_id is required'})
        return
    room = tournament_room(tournament_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_tournament(data):
    tournament_id = _tournament_id(data)
    if tournament_id is None:
        emit('error', {'message': 'tournament_id is required'})
        return
    room = tournament_room(tournament_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_tournament', handle_join_tournament, namespace='/ws')
    socketio.on_event('leave_tournament', handle_leave_tournament, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_tournament', handle_join_tournament, namespace='/')
        socketio.on_event('leave_tournament', handle_leave_tournament, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
