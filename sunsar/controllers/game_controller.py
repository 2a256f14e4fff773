"""
Game Controller

Handles all puzzle-related HTTP endpoints.
"""

from dataclasses import asdict
from flask import Blueprint, request, jsonify
from ..config.game_settings import get_word_statistics
from ..utils.decorators import require_game_service
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _game_response(game_service, player_id, action, ok=True, message=""):
    """Build the standard response for an action on the player's game."""
    game = game_service.get_game(player_id)
    stats_recorded = game_service.record_stats(player_id)

    response_data = {
        'success': ok,
        'message': message,
        'state': asdict(game.view()),
        'stats_recorded': stats_recorded
    }
    if not ok:
        response_data['error'] = message

    game_logger.log_server_response(
        request, action, ok, response_data, player_id,
        game_state=game.state.value, guesses=len(game.guesses)
    )
    return jsonify(response_data), (200 if ok else 400)


def _error_response(action, error, player_id=None):
    game_logger.log_error(request, error, action, player_id)
    error_response = {
        'success': False,
        'error': str(error)
    }
    game_logger.log_server_response(request, action, False, error_response, player_id)
    return jsonify(error_response), 500


@game_bp.route('/game', methods=['GET'])
@require_game_service
def get_game(game_service, player_id):
    """Start or resume today's puzzle."""
    try:
        game_logger.log_user_action(request, 'get_game', player_id)
        return _game_response(game_service, player_id, 'get_game')
    except Exception as e:
        return _error_response('get_game', e, player_id)


@game_bp.route('/game/key', methods=['POST'])
@require_game_service
def press_key(game_service, player_id):
    """Apply one keyboard event (a letter, ENTER or BACKSPACE)."""
    try:
        data = request.get_json(silent=True) or {}
        if 'key' not in data:
            error_response = {
                'success': False,
                'error': 'Key is required'
            }
            game_logger.log_server_response(request, 'key', False, error_response, player_id)
            return jsonify(error_response), 400

        key = data['key']
        game_logger.log_user_action(request, 'key', player_id, key=key)

        game = game_service.get_game(player_id)
        ok, message = game.handle_key(key)

        # Ignored keys (full row, empty backspace) are not errors
        if not ok and not message:
            ok = True
        return _game_response(game_service, player_id, 'key', ok, message)
    except Exception as e:
        return _error_response('key', e, player_id)


@game_bp.route('/game/guess', methods=['POST'])
@require_game_service
def submit_guess(game_service, player_id):
    """Submit a whole word as the next guess."""
    try:
        data = request.get_json(silent=True) or {}
        guess = data.get('guess')
        if not isinstance(guess, str):
            error_response = {
                'success': False,
                'error': 'Guess is required'
            }
            game_logger.log_server_response(request, 'submit_guess', False, error_response, player_id)
            return jsonify(error_response), 400

        game_logger.log_user_action(
            request, 'submit_guess', player_id,
            guess=guess, guess_length=len(guess)
        )

        game = game_service.get_game(player_id)
        ok, message = game.guess_word(guess)
        return _game_response(game_service, player_id, 'submit_guess', ok, message)
    except Exception as e:
        return _error_response('submit_guess', e, player_id)


@game_bp.route('/game/hint', methods=['POST'])
@require_game_service
def use_hint(game_service, player_id):
    """Reveal the hint, leaving one guess."""
    try:
        game_logger.log_user_action(request, 'use_hint', player_id)

        game = game_service.get_game(player_id)
        ok, message = game.use_hint()
        return _game_response(game_service, player_id, 'use_hint', ok, message)
    except Exception as e:
        return _error_response('use_hint', e, player_id)


@game_bp.route('/game', methods=['DELETE'])
@require_game_service
def reset_game(game_service, player_id):
    """Drop the in-memory session; the next request resumes from storage."""
    try:
        game_logger.log_user_action(request, 'reset_game', player_id)

        response_data = {
            'success': game_service.reset_player(player_id)
        }
        game_logger.log_server_response(request, 'reset_game', True, response_data, player_id)
        return jsonify(response_data)
    except Exception as e:
        return _error_response('reset_game', e, player_id)


@game_bp.route('/stats', methods=['GET'])
@require_game_service
def get_stats(game_service, player_id):
    """Return the player's statistics."""
    try:
        game_logger.log_user_action(request, 'get_stats', player_id)

        stats = game_service.get_stats(player_id)
        response_data = {
            'success': True,
            'stats': stats.to_dict(),
            'win_percentage': stats.win_percentage
        }
        game_logger.log_server_response(request, 'get_stats', True, response_data, player_id)
        return jsonify(response_data)
    except Exception as e:
        return _error_response('get_stats', e, player_id)


@game_bp.route('/share', methods=['GET'])
@require_game_service
def get_share_text(game_service, player_id):
    """Return the emoji summary for the clipboard."""
    try:
        game_logger.log_user_action(request, 'share', player_id)

        try:
            text = game_service.share_text(player_id)
        except ValueError as e:
            error_response = {
                'success': False,
                'error': str(e)
            }
            game_logger.log_server_response(request, 'share', False, error_response, player_id)
            return jsonify(error_response), 400

        response_data = {
            'success': True,
            'text': text
        }
        game_logger.log_server_response(request, 'share', True, response_data, player_id)
        return jsonify(response_data)
    except Exception as e:
        return _error_response('share', e, player_id)


@game_bp.route('/countdown', methods=['GET'])
@require_game_service
def get_countdown(game_service, player_id):
    """Time left until the next puzzle."""
    try:
        response_data = {
            'success': True,
            **game_service.countdown()
        }
        return jsonify(response_data)
    except Exception as e:
        return _error_response('countdown', e, player_id)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    from ..services.game_service import get_game_service

    try:
        game_service = get_game_service()

        response_data = {
            'status': 'healthy' if game_service else 'degraded',
            'active_games': len(game_service.games) if game_service else 0,
            'day_key': game_service.day_keys.current_day_key() if game_service else None,
            'word_list': get_word_statistics(),
            'log_stats': game_logger.get_log_stats()
        }
        game_logger.log_server_response(request, 'health_check', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
