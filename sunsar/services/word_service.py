"""
Word Service

Resolves the solution word and hint for a puzzle day. The static provider
picks deterministically from the bundled word list; the generative provider
asks an LLM and falls back to the static provider whenever the LLM is
missing, down, or returns something unusable.
"""

import json
import re
from typing import Dict, List, Optional, Sequence, Set, Tuple

from litellm import completion

from ..config.game_settings import WORD_LENGTH, WordEntry
from ..utils.game_logger import game_logger

HINT_UNAVAILABLE = "Sorry, the hint service is unavailable right now."
HINT_FAILED = "A mysterious force prevents a hint from appearing."

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def day_key_index(day_key: str, size: int) -> int:
    """
    Maps a day key onto a list index.

    Uses the 32-bit ``h = 31*h + c`` string hash so the index only depends on
    the key text.
    """
    if size <= 0:
        raise ValueError("Cannot index into an empty word list")
    h = 0
    for char in day_key:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h) % size


class WordProvider:
    """Static, deterministic word source backed by the bundled word list."""

    def __init__(self, entries: Sequence[WordEntry], word_length: int = WORD_LENGTH):
        self.word_length = word_length
        self.entries: List[WordEntry] = [e for e in entries if len(e.word) == word_length]
        if not self.entries:
            raise ValueError(f"Word list has no {word_length}-letter words")
        self._definitions: Dict[str, str] = {e.word: e.definition for e in self.entries}

    @property
    def valid_words(self) -> Set[str]:
        return set(self._definitions)

    def resolve_for_day(self, day_key: str) -> Tuple[str, Optional[str]]:
        """Returns (solution, definition) for the day; same key, same word."""
        entry = self.entries[day_key_index(day_key, len(self.entries))]
        return entry.word, entry.definition or None

    def resolve_hint_only(self, word: str) -> str:
        return self._definitions.get(word.upper()) or HINT_UNAVAILABLE


class LLMClient:
    """Thin wrapper over litellm so providers can be tested with a fake client."""

    def __init__(self, model: str, api_key: Optional[str] = None, timeout: float = 10):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    def complete(self, prompt: str) -> str:
        response = completion(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            api_key=self.api_key,
            timeout=self.timeout,
        )
        return response.choices[0].message.content or ""


class GenerativeWordProvider:
    """
    LLM-backed word source with a deterministic fallback.

    Never raises: every failure is logged and answered by ``fallback``.
    """

    def __init__(self, fallback: WordProvider, client: Optional[LLMClient] = None):
        self.fallback = fallback
        self.client = client
        self.word_length = fallback.word_length
        self._warned_missing_client = False

    @property
    def valid_words(self) -> Set[str]:
        return self.fallback.valid_words

    def _client_or_warn(self) -> Optional[LLMClient]:
        if self.client is None and not self._warned_missing_client:
            game_logger.logger.warning("No LLM API key configured, using the static word list")
            self._warned_missing_client = True
        return self.client

    def resolve_for_day(self, day_key: str) -> Tuple[str, Optional[str]]:
        client = self._client_or_warn()
        if client is None:
            return self.fallback.resolve_for_day(day_key)

        prompt = (
            f"Generate a single, common, {self.word_length}-letter English word in lowercase "
            f"for the date {day_key}. This must be the same word every time for the same date. "
            f"Also write a short, cryptic, one-sentence hint for it that does not contain the "
            f"word itself or any of its letters. Respond with only a JSON object of the form "
            f'{{"word": "...", "hint": "..."}}.'
        )
        try:
            raw = client.complete(prompt)
            word, hint = self._parse_word_response(raw)
        except Exception as e:
            game_logger.log_provider_failure('resolve_for_day', e, day_key=day_key)
            return self.fallback.resolve_for_day(day_key)

        return word, hint

    def resolve_hint_only(self, word: str) -> str:
        client = self._client_or_warn()
        if client is None:
            return HINT_UNAVAILABLE

        prompt = (
            f"Generate a short, cryptic, puzzle-like hint for the {self.word_length}-letter word "
            f"\"{word.upper()}\". The hint should be a single sentence and must not include the "
            f"word itself or any of its letters. For example, for 'CLOCK', a good hint is "
            f"'I have a face but no eyes, and hands but no arms.'"
        )
        try:
            hint = client.complete(prompt).strip()
        except Exception as e:
            game_logger.log_provider_failure('resolve_hint_only', e)
            return HINT_FAILED

        if not hint:
            game_logger.log_provider_failure('resolve_hint_only', ValueError("Empty hint response"))
            return HINT_FAILED
        return hint

    def _parse_word_response(self, raw: str) -> Tuple[str, Optional[str]]:
        """
        Raises:
            ValueError: If the response is not a JSON object holding a valid word
        """
        text = _CODE_FENCE.sub("", (raw or "").strip())
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got: {raw!r}")

        word = str(data.get("word", "")).strip().lower()
        if len(word) != self.word_length or not re.fullmatch(r"[a-z]+", word):
            raise ValueError(f"Provider returned an invalid word: {word!r}")

        hint = data.get("hint")
        hint = hint.strip() if isinstance(hint, str) and hint.strip() else None
        return word.upper(), hint


def build_word_provider(config, entries: Sequence[WordEntry]):
    """Generative provider when an API key is configured, static otherwise."""
    static = WordProvider(entries)
    if not getattr(config, 'GEMINI_API_KEY', None):
        return static
    client = LLMClient(config.LLM_MODEL, config.GEMINI_API_KEY, config.LLM_TIMEOUT_SECONDS)
    return GenerativeWordProvider(static, client)
