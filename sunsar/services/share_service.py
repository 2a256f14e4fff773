"""
Share Service

Formats a finished puzzle as the spoiler-free emoji grid players paste into
chats. Writing it to the clipboard is the browser's job.
"""

from typing import Sequence

from ..models.game import GameState, LetterStatus
from .evaluator import score_guess

EMOJI = {
    LetterStatus.CORRECT: "🟩",
    LetterStatus.PRESENT: "🟨",
    LetterStatus.ABSENT: "⬛",
}


def build_share_text(day_key: str,
                     game_state: GameState,
                     guesses: Sequence[str],
                     solution: str,
                     max_attempts: int,
                     title: str = "SunSar") -> str:
    """
    Builds e.g. ``SunSar 2025-01-31 3/6`` followed by a blank line and one
    emoji row per guess. A lost game shows ``X`` instead of the guess count.

    Raises:
        ValueError: If the game is still being played
    """
    if not game_state.is_terminal:
        raise ValueError("Results can only be shared once the game is over")

    score = len(guesses) if game_state is GameState.WON else "X"
    header = f"{title} {day_key} {score}/{max_attempts}"

    rows = [
        "".join(EMOJI[status] for status in score_guess(guess, solution))
        for guess in guesses
    ]
    return f"{header}\n\n" + "\n".join(rows)
