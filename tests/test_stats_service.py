import json

import pytest

from sunsar.models.game import GameState
from sunsar.models.stats import GameStats
from sunsar.services.stats_service import StatsTracker
from sunsar.services.storage import GAME_STATS_KEY, LAST_STAT_UPDATE_KEY, MemoryStorage


class FlakyStorage(MemoryStorage):
    """Storage whose multi-key writes fail until ``fail`` is cleared."""

    def __init__(self):
        super().__init__()
        self.fail = True

    def set_many(self, values):
        if self.fail:
            raise OSError("disk full")
        super().set_many(values)


@pytest.fixture
def tracker(storage):
    return StatsTracker(storage)


def test_defaults_when_nothing_stored(tracker):
    assert tracker.load() == GameStats()
    assert tracker.last_update_day is None


def test_playing_is_not_recorded(tracker):
    assert tracker.record_if_needed("2025-03-10", GameState.PLAYING) is False
    assert tracker.load().games_played == 0


def test_win_is_recorded_once_per_day(tracker, storage):
    assert tracker.record_if_needed("2025-03-10", GameState.WON) is True
    assert tracker.record_if_needed("2025-03-10", GameState.WON) is False

    assert tracker.load() == GameStats(games_played=1, games_won=1, current_streak=1, max_streak=1)
    assert storage.get(LAST_STAT_UPDATE_KEY) == "2025-03-10"


def test_new_tracker_sees_marker(storage):
    StatsTracker(storage).record_if_needed("2025-03-10", GameState.LOST)
    assert StatsTracker(storage).record_if_needed("2025-03-10", GameState.LOST) is False
    assert StatsTracker(storage).load().games_played == 1


def test_streaks_over_several_days(tracker):
    results = [
        ("2025-03-01", GameState.WON),
        ("2025-03-02", GameState.WON),
        ("2025-03-03", GameState.LOST),
        ("2025-03-04", GameState.WON),
    ]
    for day, state in results:
        tracker.record_if_needed(day, state)

    assert tracker.load() == GameStats(games_played=4, games_won=3, current_streak=1, max_streak=2)


def test_corrupt_stats_reset_to_zero(storage, tracker):
    storage.set(GAME_STATS_KEY, "{broken")
    assert tracker.load() == GameStats()
    assert storage.get(GAME_STATS_KEY) is None

    storage.set(GAME_STATS_KEY, json.dumps({"gamesPlayed": -1}))
    assert tracker.load() == GameStats()


def test_failed_write_changes_nothing_and_retry_counts_once():
    storage = FlakyStorage()
    tracker = StatsTracker(storage)

    with pytest.raises(OSError):
        tracker.record_if_needed("2025-03-10", GameState.WON)
    assert tracker.load() == GameStats()
    assert tracker.last_update_day is None

    storage.fail = False
    assert tracker.record_if_needed("2025-03-10", GameState.WON) is True
    assert tracker.record_if_needed("2025-03-10", GameState.WON) is False
    assert tracker.load().games_played == 1


def test_win_percentage():
    assert GameStats().win_percentage == 0
    assert GameStats(games_played=3, games_won=2).win_percentage == 67


def test_stats_serialization_round_trip():
    stats = GameStats(games_played=5, games_won=4, current_streak=2, max_streak=3)
    assert stats.to_dict() == {"gamesPlayed": 5, "gamesWon": 4, "currentStreak": 2, "maxStreak": 3}
    assert GameStats.from_dict(stats.to_dict()) == stats
