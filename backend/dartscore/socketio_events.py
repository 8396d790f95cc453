from flask_socketio import join_room, leave_room, emit
from flask import current_app
from dartscore import socketio
from dartscore.registry import Match, get_match


def room_for(match_code: str) -> str:
    return f"match:{match_code.upper()}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_match(data):
    match_code = (data or {}).get('match_code')
    if not match_code:
        emit('error', {'message': 'match_code is required'})
        return
    if not get_match(match_code):
        emit('error', {'message': 'Match not found'})
        return
    room = room_for(match_code)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_match(data):
    match_code = (data or {}).get('match_code')
    if not match_code:
        emit('error', {'message': 'match_code is required'})
        return
    room = room_for(match_code)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def broadcast(match: Match, events) -> None:
    """Push engine output events, then a state_update, to the match room.

    Uses socketio.emit since this may be called from a background task.
    """
    room = room_for(match.code)
    for event in events:
        payload = event.to_dict()
        payload['match_code'] = match.code
        current_app.logger.info(f"[{event.name}] match={match.code} {payload}")
        socketio.emit(event.name, payload, to=room, namespace='/ws')
    socketio.emit('state_update', {'match_code': match.code}, to=room, namespace='/ws')


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_match', handle_join_match, namespace='/ws')
    socketio.on_event('leave_match', handle_leave_match, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        # Test-only mirror on default namespace
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_match', handle_join_match, namespace='/')
        socketio.on_event('leave_match', handle_leave_match, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
