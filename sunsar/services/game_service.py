"""
Game Service

Contains the daily puzzle state machine and the registry of player sessions.
"""

import functools
import json
import threading
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..config.game_settings import MAX_ATTEMPTS, WORD_ENTRIES, WORD_LENGTH
from ..models.game import GameState, GameView, LetterStatus, SavedGameState
from ..models.stats import GameStats
from ..utils.game_logger import game_logger
from ..utils.helpers import BACKSPACE, ENTER, normalize_key
from .date_service import DateKeyProvider, format_countdown
from .evaluator import replay_key_statuses, score_guess, update_key_statuses
from .share_service import build_share_text
from .stats_service import StatsTracker
from .storage import GAME_STATE_KEY, KeyValueStorage, StorageFactory
from .word_service import build_word_provider

# Validation messages shown to the player
NOT_ENOUGH_LETTERS = "Not enough letters"
TOO_MANY_LETTERS = "Too many letters"
LETTERS_ONLY = "Guess must contain only letters"
NOT_IN_WORD_LIST = "Not in word list"
ALREADY_GUESSED = "Already guessed"
HINT_ALREADY_USED = "Hint already used"
GAME_OVER = "Game is already over"
LOADING = "Loading, please wait"
INVALID_KEY = "Invalid key"


def synchronized(method):
    """Runs a DailyGame method while holding that game's lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)
    return wrapper


class DailyGame:
    """
    One player's puzzle for one day.

    States: playing -> won, playing -> lost; won and lost are terminal.
    While ``loading`` is set (the word provider is being consulted) every
    mutating call is refused. State is written to storage after every change.
    """

    def __init__(self,
                 storage: KeyValueStorage,
                 word_provider,
                 day_keys: DateKeyProvider,
                 max_attempts: int = MAX_ATTEMPTS,
                 word_length: int = WORD_LENGTH,
                 valid_words: Optional[Iterable[str]] = None,
                 reject_duplicates: bool = True,
                 player_id: Optional[str] = None):
        self.storage = storage
        self.word_provider = word_provider
        self.day_keys = day_keys
        self.default_max_attempts = max_attempts
        self.word_length = word_length
        self.valid_words: Optional[Set[str]] = {w.upper() for w in valid_words} if valid_words is not None else None
        self.reject_duplicates = reject_duplicates
        self.player_id = player_id

        self.day_key: Optional[str] = None
        self.solution = ""
        self.guesses: List[str] = []
        self.current_guess = ""
        self.state = GameState.PLAYING
        self.key_statuses: Dict[str, LetterStatus] = {}
        self.hint: Optional[str] = None
        self.hint_used = False
        self.max_attempts = max_attempts
        self.loading = False
        self.initialized = False
        # Reentrant: handle_key and guess_word call other locked methods
        self.lock = threading.RLock()

    @synchronized
    def initialize(self, day_key: Optional[str] = None) -> "DailyGame":
        """
        Resumes the saved puzzle for ``day_key`` or starts a fresh one.

        Key statuses are always recomputed from the saved guesses.
        """
        day_key = day_key or self.day_keys.current_day_key()
        self.loading = True
        self.initialized = False
        try:
            saved = self.restore(day_key)
            if saved is not None:
                self.solution = saved.solution
                self.guesses = list(saved.guesses)
                self.state = saved.game_state
                self.hint = saved.hint
                self.hint_used = bool(saved.hint_used)
                self.max_attempts = saved.max_guesses or self.default_max_attempts
                self.key_statuses = replay_key_statuses(self.guesses, self.solution)
                game_logger.log_game_event(self.player_id, 'game_resumed', day_key,
                                           guesses=len(self.guesses), state=self.state.value)
            else:
                solution, hint = self.word_provider.resolve_for_day(day_key)
                self.solution = solution.upper()
                self.guesses = []
                self.state = GameState.PLAYING
                self.hint = hint
                self.hint_used = False
                self.max_attempts = self.default_max_attempts
                self.key_statuses = {}
                game_logger.log_game_event(self.player_id, 'game_started', day_key)
            self.day_key = day_key
            self.current_guess = ""
            self.initialized = True
        finally:
            self.loading = False

        self.persist()
        return self

    def _check_playable(self) -> Tuple[bool, str]:
        if self.loading or not self.initialized:
            return False, LOADING
        if self.state.is_terminal:
            return False, GAME_OVER
        return True, ""

    @synchronized
    def append_letter(self, letter: str) -> bool:
        ok, _ = self._check_playable()
        if not ok or len(self.current_guess) >= self.word_length:
            return False
        if len(letter) != 1 or not ("A" <= letter <= "Z"):
            return False
        self.current_guess += letter
        return True

    @synchronized
    def backspace(self) -> bool:
        ok, _ = self._check_playable()
        if not ok or not self.current_guess:
            return False
        self.current_guess = self.current_guess[:-1]
        return True

    @synchronized
    def type_word(self, word: str) -> Tuple[bool, str]:
        """Replaces the current input with a whole word, letter by letter."""
        ok, error = self._check_playable()
        if not ok:
            return False, error
        word = word.strip().upper()
        if not all("A" <= letter <= "Z" for letter in word):
            return False, LETTERS_ONLY
        if len(word) > self.word_length:
            return False, TOO_MANY_LETTERS

        self.current_guess = ""
        for letter in word:
            self.append_letter(letter)
        return True, ""

    @synchronized
    def guess_word(self, word: str) -> Tuple[bool, str]:
        """
        Types ``word`` and submits it in one step.

        A rejected word leaves the input the player had typed untouched.
        """
        previous = self.current_guess
        ok, message = self.type_word(word)
        if ok:
            ok, message = self.submit_guess()
        if not ok:
            self.current_guess = previous
        return ok, message

    @synchronized
    def submit_guess(self) -> Tuple[bool, str]:
        """
        Scores the current input.

        Returns:
            Tuple of (accepted, message); a rejected guess changes nothing
        """
        ok, error = self._check_playable()
        if not ok:
            return False, error

        guess = self.current_guess
        if len(guess) != self.word_length:
            return False, NOT_ENOUGH_LETTERS
        if self.valid_words is not None and guess not in self.valid_words and guess != self.solution:
            return False, NOT_IN_WORD_LIST
        if self.reject_duplicates and guess in self.guesses:
            return False, ALREADY_GUESSED

        statuses = score_guess(guess, self.solution)
        self.guesses.append(guess)
        self.key_statuses = update_key_statuses(self.key_statuses, guess, statuses)
        self.current_guess = ""

        message = ""
        if guess == self.solution:
            self.state = GameState.WON
            message = "You won!"
            game_logger.log_game_event(self.player_id, 'game_won', self.day_key,
                                       rounds_used=len(self.guesses), hint_used=self.hint_used)
        elif len(self.guesses) >= self.max_attempts:
            self.state = GameState.LOST
            message = f"The word was: {self.solution}"
            game_logger.log_game_event(self.player_id, 'game_lost', self.day_key,
                                       rounds_used=len(self.guesses), hint_used=self.hint_used)

        self.persist()
        return True, message

    @synchronized
    def use_hint(self) -> Tuple[bool, str]:
        """
        Reveals the hint and leaves exactly one more guess.

        Returns:
            Tuple of (accepted, message)
        """
        if self.loading or not self.initialized:
            return False, LOADING
        if self.hint_used:
            return False, HINT_ALREADY_USED
        if self.state.is_terminal:
            return False, GAME_OVER

        if not self.hint:
            self.loading = True
            try:
                self.hint = self.word_provider.resolve_hint_only(self.solution)
            finally:
                self.loading = False

        self.hint_used = True
        self.max_attempts = min(self.max_attempts, len(self.guesses) + 1)
        game_logger.log_game_event(self.player_id, 'hint_used', self.day_key,
                                   guesses=len(self.guesses), max_attempts=self.max_attempts)
        self.persist()
        return True, "Hint revealed! You have one guess left."

    @synchronized
    def handle_key(self, key: str) -> Tuple[bool, str]:
        """Dispatches one keyboard event: a letter, ENTER or BACKSPACE."""
        key = normalize_key(key)
        if key is None:
            return False, INVALID_KEY
        if key == ENTER:
            return self.submit_guess()

        ok, error = self._check_playable()
        if not ok:
            return False, error
        if key == BACKSPACE:
            return self.backspace(), ""
        return self.append_letter(key), ""

    @synchronized
    def persist(self) -> None:
        if not self.initialized:
            return
        saved = SavedGameState(
            solution=self.solution,
            guesses=list(self.guesses),
            game_state=self.state,
            last_played=self.day_key,
            hint=self.hint,
            hint_used=self.hint_used,
            max_guesses=self.max_attempts,
        )
        self.storage.set(GAME_STATE_KEY, json.dumps(saved.to_dict()))

    def restore(self, day_key: str) -> Optional[SavedGameState]:
        """
        Loads the saved puzzle if it belongs to ``day_key``.

        A corrupt save is discarded and treated as no save.
        """
        raw = self.storage.get(GAME_STATE_KEY)
        if not raw:
            return None
        try:
            saved = SavedGameState.from_dict(json.loads(raw), self.word_length)
        except (ValueError, TypeError) as e:
            game_logger.log_error(None, e, 'restore_game', self.player_id)
            self.storage.remove(GAME_STATE_KEY)
            return None

        if saved.last_played != day_key:
            return None
        return saved

    @synchronized
    def view(self) -> GameView:
        """Public snapshot of the game, without the answer while it is still in play."""
        return GameView(
            day_key=self.day_key or "",
            game_state=self.state.value,
            guesses=list(self.guesses),
            guess_results=[[s.value for s in score_guess(g, self.solution)] for g in self.guesses],
            current_guess=self.current_guess,
            key_statuses={letter: status.value for letter, status in self.key_statuses.items()},
            max_attempts=self.max_attempts,
            word_length=self.word_length,
            hint_used=self.hint_used,
            hint=self.hint if self.hint_used else None,
            loading=self.loading,
            answer=self.solution if self.state.is_terminal else None,
        )


class GameService:
    """
    Registry of player sessions.

    This class handles:
    - One DailyGame per player, re-initialised when the day key rolls over
    - Stats recording once a game is finished
    - Share text and rollover countdown for the client
    """

    def __init__(self,
                 storage_factory: StorageFactory,
                 word_provider,
                 day_keys: DateKeyProvider,
                 max_attempts: int = MAX_ATTEMPTS,
                 validate_words: bool = False,
                 reject_duplicates: bool = True,
                 share_title: str = "SunSar"):
        self.storage_factory = storage_factory
        self.word_provider = word_provider
        self.day_keys = day_keys
        self.max_attempts = max_attempts
        self.validate_words = validate_words
        self.reject_duplicates = reject_duplicates
        self.share_title = share_title
        self.games: Dict[str, DailyGame] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config) -> "GameService":
        return cls(
            storage_factory=StorageFactory.from_config(config),
            word_provider=build_word_provider(config, WORD_ENTRIES),
            day_keys=DateKeyProvider(config.REFERENCE_TIMEZONE, config.ROLLOVER_HOUR),
            max_attempts=config.MAX_ATTEMPTS,
            validate_words=config.VALIDATE_WORDS,
            reject_duplicates=config.REJECT_DUPLICATE_GUESSES,
            share_title=config.SHARE_TITLE,
        )

    def _new_game(self, player_id: str) -> DailyGame:
        return DailyGame(
            storage=self.storage_factory.for_player(player_id),
            word_provider=self.word_provider,
            day_keys=self.day_keys,
            max_attempts=self.max_attempts,
            valid_words=self.word_provider.valid_words if self.validate_words else None,
            reject_duplicates=self.reject_duplicates,
            player_id=player_id,
        )

    def get_game(self, player_id: str) -> DailyGame:
        """
        Returns the player's game for the current day, starting or resuming
        it as needed. A session left over from an earlier day is replaced.
        """
        with self._lock:
            game = self.games.get(player_id)
            if game is None:
                game = self._new_game(player_id)
                self.games[player_id] = game

        if game.loading:
            return game
        today = self.day_keys.current_day_key()
        with game.lock:
            if not game.initialized or game.day_key != today:
                game.initialize(today)
        return game

    def prune_sessions(self, today: Optional[str] = None) -> int:
        """
        Forgets sessions that do not belong to the current day.

        Saved games and stats stay in storage; a pruned player is resumed
        from storage on their next request.

        Returns:
            int: Number of sessions removed
        """
        today = today or self.day_keys.current_day_key()
        with self._lock:
            stale = [player_id for player_id, game in self.games.items()
                     if not game.loading and game.day_key != today]
            for player_id in stale:
                del self.games[player_id]
        return len(stale)

    def stats_tracker(self, player_id: str) -> StatsTracker:
        return StatsTracker(self.storage_factory.for_player(player_id))

    def get_stats(self, player_id: str) -> GameStats:
        return self.stats_tracker(player_id).load()

    def record_stats(self, player_id: str) -> bool:
        """Counts the player's finished game for today, once."""
        game = self.games.get(player_id)
        if game is None or not game.initialized:
            return False
        return self.stats_tracker(player_id).record_if_needed(game.day_key, game.state)

    def share_text(self, player_id: str) -> str:
        """
        Raises:
            ValueError: If the player's game is not over yet
        """
        game = self.get_game(player_id)
        return build_share_text(game.day_key, game.state, game.guesses, game.solution,
                                game.max_attempts, title=self.share_title)

    def countdown(self) -> Dict[str, object]:
        remaining = self.day_keys.time_until_next_rollover()
        return {
            'day_key': self.day_keys.current_day_key(),
            'remaining_ms': remaining,
            'display': format_countdown(remaining),
        }

    def reset_player(self, player_id: str) -> bool:
        """
        Drops the in-memory session; the saved game is kept.

        Returns:
            bool: True if a session was removed
        """
        with self._lock:
            return self.games.pop(player_id, None) is not None


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(config) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService.from_config(config)
    return _game_service


def set_game_service(service: Optional[GameService]) -> None:
    """Install a prebuilt service, e.g. one wired with test doubles."""
    global _game_service
    _game_service = service
