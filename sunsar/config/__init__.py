"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Puzzle rules, constants and the static word list
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    WORD_LIST, WORD_ENTRIES, WORD_LENGTH, MAX_ATTEMPTS, WordEntry,
    validate_word_list_integrity, get_word_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'WORD_LIST', 'WORD_ENTRIES', 'WORD_LENGTH', 'MAX_ATTEMPTS', 'WordEntry',
    'validate_word_list_integrity', 'get_word_statistics'
]
