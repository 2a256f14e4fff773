"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GameState, GameView, LetterStatus, SavedGameState
from .stats import GameStats

__all__ = ['GameState', 'GameView', 'LetterStatus', 'SavedGameState', 'GameStats']
