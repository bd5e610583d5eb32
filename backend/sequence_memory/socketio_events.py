from flask_socketio import emit
from flask import current_app
from sequence_memory import socketio


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})
    # Late joiners get the current round straight away
    emit('state_update', current_app.extensions['round_machine'].snapshot())


def handle_speech_done(data):
    token = (data or {}).get('token')
    if not token:
        emit('error', {'message': 'token is required'})
        return
    announcer = current_app.extensions['speech_announcer']
    if not announcer.complete(token):
        current_app.logger.info(f"[speech-ignore] token={token} unknown or already completed")


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('speech_done', handle_speech_done, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('speech_done', handle_speech_done, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
