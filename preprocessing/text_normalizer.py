"""
Text normalization: raw patent text -> list of word stems
"""

import re
import unicodedata
from typing import Iterable, List, Optional, Set

import nltk
from nltk.corpus import stopwords
from nltk.stem import PorterStemmer

from config.logging_config import setup_logging
from config.settings import NORMALIZER_OPTIONS

logger = setup_logging("text_normalizer")

_WORD = r"[^\W_]+(?:['’][^\W_]+)*"
_HYPHENATED_WORD = _WORD + r"(?:-" + _WORD + r")*"
_NUMBER = re.compile(r"^\d+$")


def english_stop_words() -> Set[str]:
    """English stop-word list from the NLTK corpus, downloaded on first use"""
    try:
        return set(stopwords.words("english"))
    except LookupError:
        logger.info("NLTK stopwords corpus missing, downloading")
        nltk.download("stopwords", quiet=True)
        return set(stopwords.words("english"))


class TextNormalizer:
    """Lowercase, tokenize, drop numbers/punctuation/symbols/stop-words, stem"""

    def __init__(self,
                 remove_numbers: bool = NORMALIZER_OPTIONS["remove_numbers"],
                 remove_punctuation: bool = NORMALIZER_OPTIONS["remove_punctuation"],
                 remove_symbols: bool = NORMALIZER_OPTIONS["remove_symbols"],
                 remove_hyphens: bool = NORMALIZER_OPTIONS["remove_hyphens"],
                 lowercase: bool = NORMALIZER_OPTIONS["lowercase"],
                 remove_stopwords: bool = NORMALIZER_OPTIONS["remove_stopwords"],
                 stem: bool = NORMALIZER_OPTIONS["stem"],
                 stop_words: Optional[Iterable[str]] = None):
        self.remove_numbers = remove_numbers
        self.remove_punctuation = remove_punctuation
        self.remove_symbols = remove_symbols
        self.remove_hyphens = remove_hyphens
        self.lowercase = lowercase
        self.remove_stopwords = remove_stopwords
        self.stem = stem

        self._stop_words = set(stop_words) if stop_words is not None else None
        self._stemmer = PorterStemmer() if stem else None
        word = _WORD if remove_hyphens else _HYPHENATED_WORD
        self._pattern = re.compile(rf"({word})|([^\w\s]|_)")

    @property
    def stop_words(self) -> Set[str]:
        if self._stop_words is None:
            self._stop_words = english_stop_words()
        return self._stop_words

    def _keep_mark(self, char: str) -> bool:
        category = unicodedata.category(char)[0]
        if category == "P":
            return not self.remove_punctuation
        if category == "S":
            return not self.remove_symbols
        return False

    def tokenize(self, text: str) -> List[str]:
        tokens = []
        for match in self._pattern.finditer(text):
            word, mark = match.group(1), match.group(2)
            if word is not None:
                tokens.append(word)
            elif self._keep_mark(mark):
                tokens.append(mark)
        return tokens

    def normalize(self, text) -> List[str]:
        if not isinstance(text, str):
            return []
        if self.lowercase:
            text = text.lower()

        tokens = self.tokenize(text)
        if self.remove_numbers:
            tokens = [t for t in tokens if not _NUMBER.match(t)]
        if self.remove_stopwords:
            stop_words = self.stop_words
            tokens = [t for t in tokens if t not in stop_words]
        if self._stemmer is not None:
            tokens = [self._stemmer.stem(t) for t in tokens]
        return tokens

    __call__ = normalize

