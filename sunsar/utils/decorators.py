"""
Endpoint Decorators

Contains decorators shared by the HTTP endpoints.
"""

from functools import wraps
from flask import jsonify


def require_game_service(f):
    """
    Decorator that resolves the game service and the calling player.

    The wrapped view receives ``game_service`` and ``player_id`` keyword
    arguments, or the request is answered with a 500 if the service is down.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service
        from .helpers import get_player_id

        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        kwargs['game_service'] = game_service
        kwargs['player_id'] = get_player_id()
        return f(*args, **kwargs)

    return decorated_function
