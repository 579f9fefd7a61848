import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Set

from nltk.corpus import words as nltk_words

logger = logging.getLogger(__name__)

WORD_FILE_NAME = 'twl06.txt'


def default_word_file_paths() -> List[str]:
    here = os.path.dirname(os.path.abspath(__file__))
    return [
        WORD_FILE_NAME,
        os.path.join(here, WORD_FILE_NAME),
        os.path.join(os.path.dirname(here), WORD_FILE_NAME),
        os.path.join(os.path.dirname(here), 'data', WORD_FILE_NAME),
    ]


def _normalise(candidates: Iterable[str]) -> Set[str]:
    return {w.strip().upper() for w in candidates
            if len(w.strip()) >= 2 and w.strip().isalpha()}


class WordDictionary:
    """Case-insensitive set of playable words. An empty dictionary accepts nothing."""

    def __init__(self, words: Optional[Iterable[str]] = None, source: str = 'memory'):
        self.words: Set[str] = _normalise(words or [])
        self.source = source

    def is_valid_word(self, word: str) -> bool:
        if not word or len(word) < 2 or not word.isalpha():
            return False
        return word.upper() in self.words

    __call__ = is_valid_word

    def __len__(self) -> int:
        return len(self.words)

    @property
    def is_loaded(self) -> bool:
        return bool(self.words)

    def stats(self) -> Dict[str, Any]:
        return {"is_loaded": self.is_loaded, "word_count": len(self.words), "source": self.source}

    @classmethod
    def from_file(cls, path: str) -> 'WordDictionary':
        with open(path, 'r', encoding='utf-8') as f:
            return cls(f, source=path)

    @classmethod
    def from_nltk(cls) -> 'WordDictionary':
        """Uses the NLTK `words` corpus. Requires `nltk.download('words')` beforehand."""
        try:
            return cls(nltk_words.words(), source='nltk:words')
        except LookupError:
            logger.warning("NLTK 'words' corpus is not installed. Dictionary is empty; every word will be rejected.")
            return cls(source='nltk:words')


def load_dictionary(path: Optional[str] = None, use_nltk: bool = False) -> WordDictionary:
    """
    Loads the first word list found among `path` and the default locations.
    Falls back to the NLTK corpus when asked to, otherwise to an empty dictionary.
    """
    possible_paths = [path] if path else default_word_file_paths()
    dict_path_found = next((p for p in possible_paths if os.path.exists(p)), None)

    if dict_path_found:
        try:
            dictionary = WordDictionary.from_file(dict_path_found)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading dictionary file {dict_path_found}: {e}.")
        else:
            if dictionary.is_loaded:
                logger.info(f"Successfully loaded {len(dictionary)} words from {dict_path_found}")
                return dictionary
            logger.warning(f"Dictionary file {dict_path_found} contained no valid words.")
    else:
        logger.warning(f"No word list found at {possible_paths}.")

    if use_nltk:
        return WordDictionary.from_nltk()
    logger.warning("Using an empty dictionary; every word will be rejected.")
    return WordDictionary(source='empty')
