"""
smartprep/sockets.py

The browser joins a room named after its session id; assessment timers
push `timer_tick` and `stage_expired` events to that room.
"""
from flask import session
from flask_socketio import emit, join_room

from smartprep import socketio


@socketio.on("join_session")
def handle_join_session():
    sid = session.get('sid')
    if not sid:
        emit("session_error", {"message": "No session. Reload the page."})
        return
    join_room(sid)
    emit("joined", {"room": sid})
