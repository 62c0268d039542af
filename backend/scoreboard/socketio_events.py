from flask_socketio import join_room, leave_room, emit
from flask import current_app
from scoreboard import socketio

NAMESPACE = '/ws'


def tournament_room(tournament_id) -> str:
    return f"tournament:{tournament_id}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_subscribe(data):
    tournament_id = (data or {}).get('tournament_id')
    if tournament_id is None:
        emit('error', {'message': 'tournament_id is required'})
        return
    room = tournament_room(tournament_id)
    join_room(room)
    emit('subscribed', {'room': room})


def handle_unsubscribe(data):
    tournament_id = (data or {}).get('tournament_id')
    if tournament_id is None:
        emit('error', {'message': 'tournament_id is required'})
        return
    room = tournament_room(tournament_id)
    leave_room(room)
    emit('unsubscribed', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


# ---- Broadcast helpers ----
# Viewers re-fetch authoritative state on every event, so a lost emit only
# delays an update; failures are logged and never raised to the writer.

def broadcast(event: str, payload: dict, tournament_id) -> None:
    try:
        socketio.emit(event, payload, to=tournament_room(tournament_id), namespace=NAMESPACE)
    except Exception as exc:
        current_app.logger.warning(f"[broadcast-failed] event={event} tournament={tournament_id}: {exc}")


def broadcast_score_change(entry) -> None:
    """Announce a committed score entry, override or unlock."""
    tournament_id = entry.tournament.id
    if entry.score is not None:
        broadcast('score-updated', entry.score.to_dict(), tournament_id)
    broadcast('match-updated', entry.match.to_dict(), tournament_id)
    broadcast('round-updated', entry.round.to_dict(), tournament_id)
    broadcast('tournament-updated', entry.tournament.to_dict(), tournament_id)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('subscribe', handle_subscribe, namespace=NAMESPACE)
    socketio.on_event('unsubscribe', handle_unsubscribe, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)

    if testing:
        # Test-only mirror on default namespace
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('subscribe', handle_subscribe, namespace='/')
        socketio.on_event('unsubscribe', handle_unsubscribe, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
