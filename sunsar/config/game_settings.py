"""
Game Configuration Constants Module

Puzzle rules and the static word source. The word list doubles as the
deterministic fallback for the generative word provider, so it is loaded and
validated once at import time.
"""

import csv
import os
from typing import Dict, Final, List, NamedTuple

# Core Puzzle Configuration Constants
WORD_LENGTH: Final[int] = 5
MAX_ATTEMPTS: Final[int] = 6
"""
Default number of guesses per puzzle. Using a hint lowers it for that game only.
"""

ROLLOVER_HOUR: Final[int] = 8
REFERENCE_TIMEZONE: Final[str] = "America/New_York"

FALLBACK_WORDS: Final[List[str]] = [
    'REACT', 'WORLD', 'HELLO', 'GREAT', 'PARTY',
    'HOUSE', 'CHAIR', 'MUSIC', 'WATER', 'EARTH',
]
"""
Last-resort word source when words.csv yields no usable entries.
"""

WORDS_FILE: Final[str] = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'words.csv')


class WordEntry(NamedTuple):
    """One solution candidate with its dictionary definition."""
    word: str
    definition: str


def load_word_entries(path: str = WORDS_FILE, word_length: int = WORD_LENGTH) -> List[WordEntry]:
    """
    Load word/definition pairs from a comma-separated file.

    Each line holds a word followed by its definition. Lines whose word is not
    exactly ``word_length`` alphabetic letters are skipped; words are
    uppercased and duplicates keep their first occurrence.

    Returns:
        List[WordEntry]: Entries in file order

    Raises:
        FileNotFoundError: If the word file does not exist
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Word list file not found: {path}")

    entries: List[WordEntry] = []
    seen = set()
    with open(path, 'r', encoding='utf-8', newline='') as f:
        for row in csv.reader(f):
            if not row:
                continue
            word = row[0].strip().upper()
            if len(word) != word_length or not word.isascii() or not word.isalpha():
                continue
            if word in seen:
                continue
            seen.add(word)
            definition = ','.join(row[1:]).strip()
            entries.append(WordEntry(word, definition))
    return entries


def load_entries_with_fallback(path: str = WORDS_FILE) -> List[WordEntry]:
    """Word file entries, or FALLBACK_WORDS without definitions when the file has none."""
    entries = load_word_entries(path)
    if not entries:
        entries = [WordEntry(word, '') for word in FALLBACK_WORDS]
    return entries


# Curated word database loaded from words.csv
WORD_ENTRIES: Final[List[WordEntry]] = load_entries_with_fallback()
WORD_LIST: Final[List[str]] = [entry.word for entry in WORD_ENTRIES]


def validate_word_list_integrity(words: List[str] = WORD_LIST) -> bool:
    """
    Validates the integrity and consistency of the word database.

    This function performs validation to ensure:
    1. Length validation: All words must be exactly WORD_LENGTH characters
    2. Character validation: Only alphabetic characters allowed
    3. Uniqueness validation: No duplicate entries
    4. Format validation: Consistent uppercase formatting

    Returns:
        bool: True if word list passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not words:
        raise ValueError("Word list cannot be empty")

    for index, word in enumerate(words):
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word at index {index} '{word}' is not {WORD_LENGTH} characters long")

        if not word.isalpha():
            raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")

        if not word.isupper():
            raise ValueError(f"Word at index {index} '{word}' is not in uppercase format")

    if len(words) != len(set(words)):
        duplicates = sorted({word for word in words if words.count(word) > 1})
        raise ValueError(f"Duplicate words found in word list: {duplicates}")

    return True


def get_word_statistics(words: List[str] = WORD_LIST) -> dict:
    """
    Summarises the word list for the health endpoint.

    Returns:
        dict: total_words, avg_vowel_count and the five most common letters
    """
    if not words:
        return {"error": "Word list is empty"}

    vowels = set('AEIOU')
    total_vowels = sum(len([char for char in word if char in vowels]) for word in words)

    letter_frequency: Dict[str, int] = {}
    for word in words:
        for char in word:
            letter_frequency[char] = letter_frequency.get(char, 0) + 1

    return {
        "total_words": len(words),
        "avg_vowel_count": round(total_vowels / len(words), 2),
        "most_common_letters": sorted(letter_frequency.items(), key=lambda x: x[1], reverse=True)[:5]
    }


if __name__ == "__main__":

    try:
        validate_word_list_integrity()
        print(" Word list validation passed")
        print(f" Word statistics: {get_word_statistics()}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
