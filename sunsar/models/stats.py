"""
Statistics Data Models

Contains the per-player aggregate play statistics.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class GameStats:
    """Aggregate statistics across all daily puzzles a player has finished."""
    games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    max_streak: int = 0

    @property
    def win_percentage(self) -> int:
        if not self.games_played:
            return 0
        return round(100 * self.games_won / self.games_played)

    def to_dict(self) -> Dict[str, int]:
        return {
            "gamesPlayed": self.games_played,
            "gamesWon": self.games_won,
            "currentStreak": self.current_streak,
            "maxStreak": self.max_streak,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameStats":
        """
        Raises:
            ValueError: If a counter is missing, not an integer or negative
        """
        if not isinstance(data, dict):
            raise ValueError("Stats must be a JSON object")

        values = {}
        for attr, key in (("games_played", "gamesPlayed"), ("games_won", "gamesWon"),
                          ("current_streak", "currentStreak"), ("max_streak", "maxStreak")):
            value = data.get(key)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"Invalid stats field {key}: {value!r}")
            values[attr] = value
        return cls(**values)
