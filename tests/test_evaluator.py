from collections import Counter
from itertools import product

import pytest

from sunsar.models.game import LetterStatus
from sunsar.services.evaluator import replay_key_statuses, score_guess, update_key_statuses

C, P, A = LetterStatus.CORRECT, LetterStatus.PRESENT, LetterStatus.ABSENT


def test_exact_match_is_all_correct():
    assert score_guess("CRANE", "CRANE") == [C] * 5


def test_no_shared_letters_is_all_absent():
    assert score_guess("MOUTH", "CRANE") == [A] * 5


def test_trace_against_crane():
    assert score_guess("TRACE", "CRANE") == [A, C, C, P, C]


def test_extra_copy_of_letter_is_absent_after_exact_match():
    # PLANT has one L; the exact L at position 1 takes it
    assert score_guess("LLAMA", "PLANT") == [A, C, C, A, A]


def test_duplicate_letters_against_double_letter_solution():
    # ALLOY has two Ls: one exact match, one present, the third guessed L is absent
    assert score_guess("LOLLY", "ALLOY") == [P, P, C, A, C]


def test_leftmost_unmatched_copy_is_marked_present():
    assert score_guess("OOZES", "ROBOT") == [P, C, A, A, A]
    assert score_guess("EERIE", "THEME") == [P, A, A, A, C]


def test_length_mismatch_raises():
    with pytest.raises(ValueError):
        score_guess("CRAN", "CRANE")


def test_scoring_matches_letter_counts_exhaustively():
    words = ["".join(letters) for letters in product("ABC", repeat=4)]
    for solution in words:
        for guess in words:
            statuses = score_guess(guess, solution)

            for i, status in enumerate(statuses):
                assert (status is C) == (guess[i] == solution[i])

            lit = Counter(g for g, s in zip(guess, statuses) if s is not A)
            for letter, count in Counter(guess).items():
                assert lit[letter] == min(count, solution.count(letter))


def test_scoring_is_deterministic():
    assert score_guess("LOLLY", "ALLOY") == score_guess("LOLLY", "ALLOY")


def test_update_key_statuses_returns_new_map():
    existing = {"C": C}
    updated = update_key_statuses(existing, "TRACE", score_guess("TRACE", "CRANE"))

    assert existing == {"C": C}
    assert updated == {"T": A, "R": C, "A": C, "C": C, "E": C}


def test_correct_is_never_downgraded():
    statuses = {}
    statuses = update_key_statuses(statuses, "CRANE", [C, C, C, C, C])
    statuses = update_key_statuses(statuses, "NACRE", [P, P, P, P, C])
    statuses = update_key_statuses(statuses, "CCCCC", [C, A, A, A, A])

    assert statuses["C"] is C
    assert statuses["N"] is C
    assert statuses["R"] is C


def test_present_is_not_downgraded_to_absent():
    statuses = update_key_statuses({}, "ABBEY", [A, P, A, A, A])
    assert statuses["B"] is P


def test_absent_upgrades_to_present_then_correct():
    statuses = update_key_statuses({}, "X", [A])
    statuses = update_key_statuses(statuses, "X", [P])
    assert statuses["X"] is P
    statuses = update_key_statuses(statuses, "X", [C])
    assert statuses["X"] is C


def test_replay_matches_incremental_updates():
    guesses = ["SLATE", "TRACE", "CRANE"]
    incremental = {}
    for guess in guesses:
        incremental = update_key_statuses(incremental, guess, score_guess(guess, "CRANE"))

    assert replay_key_statuses(guesses, "CRANE") == incremental
    assert replay_key_statuses([], "CRANE") == {}
