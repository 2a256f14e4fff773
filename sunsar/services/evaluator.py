"""
Guess Evaluator

Scores a guess against the solution and folds the result into the keyboard's
per-letter status map. Everything here is pure.
"""

from collections import Counter
from typing import Dict, Iterable, List

from ..models.game import LetterStatus

# Higher rank wins when the same letter is seen with different outcomes
_STATUS_RANK = {
    LetterStatus.ABSENT: 1,
    LetterStatus.PRESENT: 2,
    LetterStatus.CORRECT: 3,
}


def score_guess(guess: str, solution: str) -> List[LetterStatus]:
    """
    Implements the count-based Wordle letter evaluation.

    Exact matches are marked first and consume their letter. Remaining
    positions, left to right, are PRESENT while the solution still has an
    unconsumed copy of that letter, otherwise ABSENT. A letter guessed more
    times than it occurs in the solution therefore only lights up as often
    as it occurs.

    Raises:
        ValueError: If guess and solution lengths differ
    """
    if len(guess) != len(solution):
        raise ValueError(f"Guess '{guess}' and solution must have the same length")

    statuses = [LetterStatus.ABSENT] * len(solution)

    # First pass: exact positions, counting what is left over
    remaining = Counter()
    for i, (g, s) in enumerate(zip(guess, solution)):
        if g == s:
            statuses[i] = LetterStatus.CORRECT
        else:
            remaining[s] += 1

    # Second pass: wrong position, leftmost first
    for i, g in enumerate(guess):
        if statuses[i] is LetterStatus.CORRECT:
            continue
        if remaining[g] > 0:
            statuses[i] = LetterStatus.PRESENT
            remaining[g] -= 1

    return statuses


def update_key_statuses(existing: Dict[str, LetterStatus],
                        guess: str,
                        statuses: List[LetterStatus]) -> Dict[str, LetterStatus]:
    """
    Returns a new key-status map with one guess folded in.

    A letter only ever moves up (ABSENT -> PRESENT -> CORRECT); once CORRECT it
    stays CORRECT.
    """
    updated = dict(existing)
    for letter, status in zip(guess, statuses):
        current = updated.get(letter)
        if current is None or _STATUS_RANK[status] > _STATUS_RANK[current]:
            updated[letter] = status
    return updated


def replay_key_statuses(guesses: Iterable[str], solution: str) -> Dict[str, LetterStatus]:
    """Rebuilds the key-status map from a guess history."""
    key_statuses: Dict[str, LetterStatus] = {}
    for guess in guesses:
        key_statuses = update_key_statuses(key_statuses, guess, score_guess(guess, solution))
    return key_statuses
