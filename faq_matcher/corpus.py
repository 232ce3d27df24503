"""Question/answer corpus loading."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

import pandas as pd

from .errors import CorpusReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QaRecord:
    """One corpus entry. ``id`` is its 0-based position in the corpus."""

    id: int
    question: str
    answer: str


def load_corpus(
    path: Union[str, Path],
    question_column: str = "question",
    answer_column: str = "answer",
) -> List[QaRecord]:
    """Load the corpus CSV file containing questions and answers.

    Ids are assigned from row order, so the same file always yields the
    same ids. Empty cells are read as empty strings.
    """
    path = Path(path)
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except FileNotFoundError as e:
        raise CorpusReadError(f"Corpus file not found: {path}") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise CorpusReadError(f"Could not parse corpus {path}: {e}") from e

    missing = [c for c in (question_column, answer_column) if c not in df.columns]
    if missing:
        raise CorpusReadError(
            f"Corpus {path} is missing column(s) {missing}; found {list(df.columns)}"
        )

    questions = df[question_column].fillna("").tolist()
    answers = df[answer_column].fillna("").tolist()
    records = [
        QaRecord(id=i, question=q, answer=a)
        for i, (q, a) in enumerate(zip(questions, answers))
    ]
    logger.info(f"Loaded {len(records)} QA pairs from {path}")
    return records
