"""Error kinds raised by the matching core.

None of these are recovered inside the core: they abort the current
training or prediction run and are translated into a failure response
by the caller (HTTP server or CLI).
"""


class FaqMatcherError(Exception):
    """Base class for every error the core signals."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class CorpusReadError(FaqMatcherError):
    """The question/answer corpus is missing or malformed."""


class TokenizationError(FaqMatcherError):
    """The tokenizer engine could not process the input."""


class ModelDecodeError(FaqMatcherError):
    """A persisted table is missing, malformed or inconsistent."""


class EmptyQueryError(FaqMatcherError):
    """Prediction was requested without usable query text."""
