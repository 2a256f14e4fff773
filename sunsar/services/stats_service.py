"""
Stats Service

Keeps a player's aggregate statistics. A finished puzzle is counted at most
once, guarded by the stored day key of the last update.
"""

import json
from typing import Optional

from ..models.game import GameState
from ..models.stats import GameStats
from ..utils.game_logger import game_logger
from .storage import GAME_STATS_KEY, LAST_STAT_UPDATE_KEY, KeyValueStorage


class StatsTracker:
    """Owns GameStats and the last-update marker for one player."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def load(self) -> GameStats:
        """Returns stored stats; missing or corrupt stats read as zeroes."""
        raw = self.storage.get(GAME_STATS_KEY)
        stats = GameStats()
        if raw:
            try:
                stats = GameStats.from_dict(json.loads(raw))
            except (ValueError, TypeError) as e:
                game_logger.log_error(None, e, 'load_stats')
                self.storage.remove(GAME_STATS_KEY)
        return stats

    @property
    def last_update_day(self) -> Optional[str]:
        return self.storage.get(LAST_STAT_UPDATE_KEY)

    def record_if_needed(self, day_key: str, game_state: GameState) -> bool:
        """
        Counts a finished puzzle once per day.

        The new stats and the marker are written together; if that write
        fails neither is stored, so a retry still counts the game once.

        Returns:
            bool: True if the stats were updated
        """
        if not game_state.is_terminal:
            return False
        if self.last_update_day == day_key:
            return False

        current = self.load()
        won = game_state is GameState.WON
        updated = GameStats(
            games_played=current.games_played + 1,
            games_won=current.games_won + (1 if won else 0),
            current_streak=current.current_streak + 1 if won else 0,
            max_streak=current.max_streak,
        )
        updated.max_streak = max(updated.max_streak, updated.current_streak)

        self.storage.set_many({
            GAME_STATS_KEY: json.dumps(updated.to_dict()),
            LAST_STAT_UPDATE_KEY: day_key,
        })
        game_logger.log_game_event(None, 'stats_recorded', day_key,
                                   won=won, games_played=updated.games_played,
                                   current_streak=updated.current_streak)
        return True
