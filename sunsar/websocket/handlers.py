"""
WebSocket Event Handlers

Pushes the next-puzzle countdown to clients showing the end-of-game screen.
"""

from flask import current_app, request
from flask_socketio import emit
from ..services.countdown_service import CountdownTimer
from ..services.game_service import get_game_service
from ..utils.game_logger import game_logger

# One running countdown per connection
countdown_timers = {}  # sid -> CountdownTimer


def stop_countdown(sid) -> bool:
    """Stop and forget the countdown of a connection, if any."""
    timer = countdown_timers.pop(sid, None)
    if timer is None:
        return False
    timer.stop()
    return True


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    def run_timer(sid, timer):
        try:
            timer.run()
        except Exception as e:
            game_logger.log_error(None, e, 'countdown')
        finally:
            if countdown_timers.get(sid) is timer:
                countdown_timers.pop(sid, None)

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Cancel the connection's countdown."""
        stop_countdown(request.sid)

    @socketio.on('start_countdown')
    def handle_start_countdown(data=None):
        """Start (or restart) the countdown for this connection."""
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return

        sid = request.sid
        stop_countdown(sid)

        timer = CountdownTimer(
            game_service.day_keys,
            emit=lambda event, payload: socketio.emit(event, payload, to=sid),
            sleep=socketio.sleep,
            interval=current_app.config.get('COUNTDOWN_INTERVAL_SECONDS', 1.0),
        )
        countdown_timers[sid] = timer
        emit('countdown', timer.tick())
        socketio.start_background_task(run_timer, sid, timer)

    @socketio.on('stop_countdown')
    def handle_stop_countdown(data=None):
        """Stop the countdown for this connection."""
        stop_countdown(request.sid)
