from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from .corpus import QaRecord


@dataclass(frozen=True)
class Match:
    """A corpus entry whose question scored above the threshold."""

    id: int
    question: str
    answer: str
    score: float

    def to_dict(self) -> dict:
        return {
            "answer": self.answer,
            "score": self.score,
            "matchedQuestion": self.question,
        }


def rank(matrix: np.ndarray, query_vector: np.ndarray) -> List[Tuple[int, float]]:
    """
    Score every corpus document against a query vector.

    Args:
        matrix: TF-IDF matrix of the corpus, one row per document id
        query_vector: Projected query, same column order as the matrix

    Returns:
        (document_id, cosine_score) for every document, in id order.
        A zero-norm query or row scores 0.
    """
    n_docs = matrix.shape[0]
    if n_docs == 0:
        return []
    if matrix.shape[1] == 0:
        return [(i, 0.0) for i in range(n_docs)]

    # Calculate cosine similarity between query and all corpus questions
    sims = cosine_similarity(query_vector.reshape(1, -1), matrix)[0]
    sims = np.clip(sims, -1.0, 1.0)
    return [(i, float(s)) for i, s in enumerate(sims)]


def filter_matches(
    scored: Sequence[Tuple[int, float]],
    corpus: Sequence[QaRecord],
    threshold: float = 0.3,
) -> List[Match]:
    """Keep scores strictly above ``threshold``, in document id order."""
    matches = []
    for doc_id, score in scored:
        if score > threshold:
            record = corpus[doc_id]
            matches.append(Match(doc_id, record.question, record.answer, score))
    return matches
