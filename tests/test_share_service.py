import pytest

from sunsar.models.game import GameState
from sunsar.services.share_service import build_share_text


def test_won_game():
    text = build_share_text("2025-03-10", GameState.WON, ["TRACE", "CRANE"], "CRANE", 6)

    assert text == "SunSar 2025-03-10 2/6\n\n⬛🟩🟩🟨🟩\n🟩🟩🟩🟩🟩"


def test_lost_game_shows_x():
    guesses = ["HOUSE"] * 5
    text = build_share_text("2025-03-10", GameState.LOST, guesses, "CRANE", 5, title="Daily")

    header, blank, *rows = text.split("\n")
    assert header == "Daily 2025-03-10 X/5"
    assert blank == ""
    assert rows == ["⬛⬛⬛⬛🟩"] * 5


def test_duplicate_letters_use_counted_scoring():
    text = build_share_text("2025-03-10", GameState.LOST, ["LLAMA"], "PLANT", 1)
    assert text.endswith("⬛🟩🟩⬛⬛")


def test_reduced_attempts_after_hint():
    text = build_share_text("2025-03-10", GameState.WON, ["SLATE", "CRANE"], "CRANE", 2)
    assert text.startswith("SunSar 2025-03-10 2/2\n\n")


def test_playing_game_cannot_be_shared():
    with pytest.raises(ValueError):
        build_share_text("2025-03-10", GameState.PLAYING, ["TRACE"], "CRANE", 6)
