"""
Services Package

Contains all business logic and service classes.
"""

from .date_service import DateKeyProvider
from .evaluator import score_guess, update_key_statuses
from .game_service import DailyGame, GameService, get_game_service, initialize_game_service
from .share_service import build_share_text
from .stats_service import StatsTracker
from .storage import StorageFactory
from .word_service import GenerativeWordProvider, WordProvider

__all__ = [
    'DateKeyProvider',
    'score_guess', 'update_key_statuses',
    'DailyGame', 'GameService', 'get_game_service', 'initialize_game_service',
    'build_share_text',
    'StatsTracker',
    'StorageFactory',
    'GenerativeWordProvider', 'WordProvider'
]
