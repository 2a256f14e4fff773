"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class LetterStatus(Enum):
    """Per-letter outcome of a guess. EMPTY marks tiles not yet submitted."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"
    EMPTY = "empty"


class GameState(Enum):
    """Lifecycle of one daily puzzle. WON and LOST are terminal."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not GameState.PLAYING


@dataclass
class SavedGameState:
    """
    Persisted snapshot of a player's puzzle for one day.

    Serialized with the field names the browser client has always used
    (``lastPlayed``, ``hintUsed``, ``maxGuesses``) so old saves keep loading.
    """
    solution: str
    guesses: List[str]
    game_state: GameState
    last_played: str
    hint: Optional[str] = None
    hint_used: Optional[bool] = None
    max_guesses: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "solution": self.solution,
            "guesses": list(self.guesses),
            "gameState": self.game_state.value,
            "lastPlayed": self.last_played,
        }
        if self.hint is not None:
            data["hint"] = self.hint
        if self.hint_used is not None:
            data["hintUsed"] = self.hint_used
        if self.max_guesses is not None:
            data["maxGuesses"] = self.max_guesses
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], word_length: int) -> "SavedGameState":
        """
        Build a snapshot from decoded JSON.

        Raises:
            ValueError: If any field is missing or has the wrong shape
        """
        if not isinstance(data, dict):
            raise ValueError("Saved state must be a JSON object")

        solution = data.get("solution")
        if not _is_word(solution, word_length):
            raise ValueError(f"Invalid saved solution: {solution!r}")

        guesses = data.get("guesses")
        if not isinstance(guesses, list) or not all(_is_word(g, word_length) for g in guesses):
            raise ValueError("Saved guesses must be a list of words")

        last_played = data.get("lastPlayed")
        if not isinstance(last_played, str):
            raise ValueError("Saved state has no day key")

        game_state = GameState(data.get("gameState"))

        hint = data.get("hint")
        if hint is not None and not isinstance(hint, str):
            raise ValueError("Saved hint must be a string")

        hint_used = data.get("hintUsed")
        if hint_used is not None and not isinstance(hint_used, bool):
            raise ValueError("Saved hintUsed must be a boolean")

        max_guesses = data.get("maxGuesses")
        if max_guesses is not None and (isinstance(max_guesses, bool) or not isinstance(max_guesses, int) or max_guesses < 1):
            raise ValueError("Saved maxGuesses must be a positive integer")

        return cls(
            solution=solution,
            guesses=list(guesses),
            game_state=game_state,
            last_played=last_played,
            hint=hint,
            hint_used=hint_used,
            max_guesses=max_guesses,
        )


def _is_word(value: Any, word_length: int) -> bool:
    return (
        isinstance(value, str)
        and len(value) == word_length
        and value.isascii()
        and value.isalpha()
        and value.isupper()
    )


@dataclass
class GameView:
    """Client-facing game snapshot. The answer is only included once the game is over."""
    day_key: str
    game_state: str
    guesses: List[str]
    guess_results: List[List[str]]
    current_guess: str
    key_statuses: Dict[str, str]
    max_attempts: int
    word_length: int
    hint_used: bool
    hint: Optional[str] = None
    loading: bool = False
    answer: Optional[str] = None
    remaining_attempts: int = field(init=False)

    def __post_init__(self):
        self.remaining_attempts = max(self.max_attempts - len(self.guesses), 0)
