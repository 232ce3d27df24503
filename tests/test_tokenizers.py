import pytest

from faq_matcher.errors import TokenizationError
from faq_matcher.tokenizers import (
    JanomeTokenizer,
    RegexTokenizer,
    SklearnTokenizer,
    WhitespaceTokenizer,
    get_tokenizer,
)


def test_whitespace_keeps_case_and_punctuation():
    assert WhitespaceTokenizer().tokenize("  Store  hours? ") == ["Store", "hours?"]


def test_regex_lowercases_word_runs():
    assert RegexTokenizer().tokenize("What's the Store's hours?") == [
        "what's", "the", "store's", "hours",
    ]


def test_sklearn_drops_single_characters():
    assert SklearnTokenizer().tokenize("Is a store open") == ["is", "store", "open"]


def test_empty_text_has_no_tokens():
    for name in ("whitespace", "regex", "sklearn"):
        assert get_tokenizer(name).tokenize("") == []


def test_unknown_tokenizer_name():
    with pytest.raises(TokenizationError, match="Unknown tokenizer"):
        get_tokenizer("mecab")


def test_non_text_input_is_rejected():
    with pytest.raises(TokenizationError):
        RegexTokenizer().tokenize(None)


def test_engine_failures_are_wrapped():
    class Broken(WhitespaceTokenizer):
        name = "broken"

        def _split(self, text):
            raise OSError("model asset missing")

    with pytest.raises(TokenizationError, match="model asset missing"):
        Broken().tokenize("store hours")


def test_janome_segments_japanese_text():
    """Japanese has no spaces; janome splits it into words"""
    tokens = get_tokenizer("janome").tokenize("お店で楽器は演奏できますか？")

    assert "楽器" in tokens
    assert "演奏" in tokens
    assert len(tokens) > 3


def test_janome_normalises_full_width_characters():
    tokens = JanomeTokenizer().tokenize("ＡＢＣ　１２３")

    assert "ABC" in "".join(tokens)
    assert "123" in "".join(tokens)
    assert all(t.strip() for t in tokens)
