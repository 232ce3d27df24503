import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from faq_matcher.config import Settings


def write_corpus(path: Path, rows):
    """Write a question/answer CSV the way the corpus loader expects it."""
    import pandas as pd

    pd.DataFrame(rows, columns=["question", "answer"]).to_csv(path, index=False)
    return path


@pytest.fixture
def store_corpus(tmp_path):
    return write_corpus(tmp_path / "corpus.csv", [
        ("store hours", "9 to 5"),
        ("return policy", "30 days"),
    ])


@pytest.fixture
def settings(tmp_path, store_corpus):
    return Settings(
        corpus_path=str(store_corpus),
        model_path=str(tmp_path / "models" / "model.csv"),
        idf_path=str(tmp_path / "models" / "idf.csv"),
        word_list_path=str(tmp_path / "models" / "word_list.csv"),
        tokenizer="whitespace",
        similarity_threshold=0.3,
        access_key="secret",
    )
