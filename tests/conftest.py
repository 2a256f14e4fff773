import os
import tempfile

# Keep test logs out of the working tree; must happen before sunsar is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='sunsar-logs-'))

from datetime import datetime, timedelta, timezone

import pytest

from sunsar import create_app
from sunsar.config import TestingConfig, WordEntry
from sunsar.services.date_service import DateKeyProvider
from sunsar.services.game_service import DailyGame, GameService, set_game_service
from sunsar.services.storage import MemoryStorage, StorageFactory
from sunsar.services.word_service import WordProvider


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class FixedWordProvider:
    """Word provider double that always answers with the same word."""

    def __init__(self, solution="CRANE", day_hint=None, hint="Lifts heavy loads on building sites."):
        self.solution = solution
        self.day_hint = day_hint
        self.hint = hint
        self.valid_words = {"CRANE", "TRACE", "SLATE", "PLANT", "LLAMA", "ROBOT", "HOUSE", "MUSIC"}
        self.day_calls = []
        self.hint_calls = []
        self.on_day = None
        self.on_hint = None

    def resolve_for_day(self, day_key):
        self.day_calls.append(day_key)
        if self.on_day is not None:
            self.on_day()
        return self.solution, self.day_hint

    def resolve_hint_only(self, word):
        self.hint_calls.append(word)
        if self.on_hint is not None:
            self.on_hint()
        return self.hint


@pytest.fixture
def clock():
    # 15:00 UTC is 11:00 in New York (EDT) on 2025-03-10
    return FrozenClock(datetime(2025, 3, 10, 15, 0, tzinfo=timezone.utc))


@pytest.fixture
def day_keys(clock):
    return DateKeyProvider("America/New_York", 8, clock=clock)


@pytest.fixture
def entries():
    return [
        WordEntry("CRANE", "A tall machine used for lifting heavy objects"),
        WordEntry("HOUSE", "A building for human habitation"),
        WordEntry("MUSIC", ""),
    ]


@pytest.fixture
def static_provider(entries):
    return WordProvider(entries)


@pytest.fixture
def word_provider():
    return FixedWordProvider()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def make_game(storage, word_provider, day_keys):
    def _make(**kwargs):
        options = {
            'storage': storage,
            'word_provider': word_provider,
            'day_keys': day_keys,
        }
        options.update(kwargs)
        return DailyGame(**options)
    return _make


@pytest.fixture
def game(make_game):
    return make_game().initialize()


@pytest.fixture
def game_service(word_provider, day_keys):
    service = GameService(StorageFactory('memory'), word_provider, day_keys)
    set_game_service(service)
    yield service
    set_game_service(None)


@pytest.fixture
def app(game_service):
    app, socketio = create_app(TestingConfig)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def type_word(game, word):
    for letter in word:
        game.append_letter(letter)
