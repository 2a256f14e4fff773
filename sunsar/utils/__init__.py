"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_game_service
from .helpers import get_player_id, normalize_key
from .game_logger import game_logger

__all__ = ['require_game_service', 'get_player_id', 'normalize_key', 'game_logger']
