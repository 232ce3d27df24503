"""Tokenizer adapters.

Every adapter exposes ``tokenize(text) -> list[str]``. The variant used for
training must also be used for prediction, otherwise query tokens will not
line up with the trained vocabulary.
"""

import logging
import re
import unicodedata
from typing import Callable, Dict, List, Protocol

from sklearn.feature_extraction.text import CountVectorizer

from .errors import TokenizationError

logger = logging.getLogger(__name__)


class Tokenizer(Protocol):
    name: str

    def tokenize(self, text: str) -> List[str]:
        ...


class _BaseTokenizer:
    name = "base"

    def _split(self, text: str) -> List[str]:
        raise NotImplementedError

    def tokenize(self, text: str) -> List[str]:
        """Split text into tokens, wrapping engine failures."""
        if not isinstance(text, str):
            raise TokenizationError(
                f"{self.name} tokenizer expects str, got {type(text).__name__}"
            )
        try:
            return self._split(text)
        except Exception as e:
            raise TokenizationError(f"{self.name} tokenizer failed: {e}") from e


class WhitespaceTokenizer(_BaseTokenizer):
    """Split on runs of whitespace, keeping case and punctuation."""

    name = "whitespace"

    def _split(self, text: str) -> List[str]:
        return text.split()


class RegexTokenizer(_BaseTokenizer):
    """Lowercased word runs (letters, digits, underscore, apostrophe)."""

    name = "regex"
    TOKEN = re.compile(r"[\w']+")

    def _split(self, text: str) -> List[str]:
        return self.TOKEN.findall(text.lower())


class SklearnTokenizer(_BaseTokenizer):
    """scikit-learn's default word analyzer: lowercase, 2+ char tokens."""

    name = "sklearn"

    def __init__(self) -> None:
        self._analyzer = CountVectorizer().build_analyzer()

    def _split(self, text: str) -> List[str]:
        return list(self._analyzer(text))


class JanomeTokenizer(_BaseTokenizer):
    """Japanese morphological segmentation with janome.

    Text is NFKC-normalised first so full-width letters, digits and
    punctuation collapse onto their half-width forms. Whitespace tokens
    are dropped.
    """

    name = "janome"

    def __init__(self) -> None:
        # Lazy-load the dictionary; building it takes a moment
        self._engine = None

    def _get_engine(self):
        if self._engine is None:
            from janome.tokenizer import Tokenizer as _Janome
            self._engine = _Janome(wakati=True)
        return self._engine

    def _split(self, text: str) -> List[str]:
        text = unicodedata.normalize("NFKC", text)
        return [t for t in self._get_engine().tokenize(text) if t.strip()]


TOKENIZERS: Dict[str, Callable[[], Tokenizer]] = {
    WhitespaceTokenizer.name: WhitespaceTokenizer,
    RegexTokenizer.name: RegexTokenizer,
    SklearnTokenizer.name: SklearnTokenizer,
    JanomeTokenizer.name: JanomeTokenizer,
}


def get_tokenizer(name: str) -> Tokenizer:
    """Return a new tokenizer instance for a registered variant name."""
    try:
        factory = TOKENIZERS[name]
    except KeyError:
        raise TokenizationError(
            f"Unknown tokenizer '{name}'; expected one of {sorted(TOKENIZERS)}"
        ) from None
    logger.debug(f"Using {name} tokenizer")
    return factory()
