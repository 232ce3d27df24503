"""TF-IDF model building and query projection.

Weights follow

    idf(t)    = ln(N / df(t))          (default)
    idf(t)    = ln(N / (1 + df(t)))    (smooth_idf=True)
    w(t, d)   = tf(t, d) * idf(t)

where ``tf`` is the raw count of ``t`` in ``d`` and ``df`` the number of
documents containing ``t``. The vocabulary is every distinct term of the
corpus in sorted order; that order is the column order of the matrix.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

import numpy as np
from sklearn.feature_extraction.text import CountVectorizer

from .tokenizers import Tokenizer

logger = logging.getLogger(__name__)


def _identity(tokens):
    # documents arrive pre-tokenized
    return tokens


@dataclass(eq=False)
class TfidfModel:
    """Trained vocabulary, idf weights and the documents x terms matrix.

    Attributes:
        vocabulary: Distinct terms in column order.
        idf: idf weight per vocabulary term, same order.
        matrix: Dense TF-IDF weights, one row per corpus id.
    """

    vocabulary: List[str]
    idf: np.ndarray
    matrix: np.ndarray
    _index: Dict[str, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.vocabulary = list(self.vocabulary)
        self.idf = np.asarray(self.idf, dtype=np.float64).reshape(-1)
        self.matrix = np.asarray(self.matrix, dtype=np.float64)
        if self.matrix.size == 0 and self.matrix.ndim != 2:
            self.matrix = self.matrix.reshape(0, len(self.vocabulary))

        size = len(self.vocabulary)
        if self.matrix.ndim != 2 or self.matrix.shape[1] != size:
            raise ValueError(
                f"matrix shape {self.matrix.shape} does not match vocabulary size {size}"
            )
        if self.idf.shape[0] != size:
            raise ValueError(f"idf length {self.idf.shape[0]} != vocabulary size {size}")
        self._index = {term: j for j, term in enumerate(self.vocabulary)}
        if len(self._index) != size:
            raise ValueError("vocabulary contains duplicate terms")

    def __eq__(self, other):
        if not isinstance(other, TfidfModel):
            return NotImplemented
        return (
            self.vocabulary == other.vocabulary
            and np.array_equal(self.idf, other.idf)
            and np.array_equal(self.matrix, other.matrix)
        )

    __hash__ = None

    @property
    def num_documents(self) -> int:
        return self.matrix.shape[0]

    @property
    def vocabulary_size(self) -> int:
        return len(self.vocabulary)

    @classmethod
    def empty(cls, num_documents: int = 0) -> "TfidfModel":
        return cls(
            vocabulary=[],
            idf=np.zeros(0),
            matrix=np.zeros((num_documents, 0)),
        )

    def transform(self, tokens: Iterable[str]) -> np.ndarray:
        """Project a token sequence onto the trained vocabulary.

        Tokens missing from the vocabulary are dropped. A sequence with no
        known tokens yields the all-zero vector.
        """
        counts = np.zeros(self.vocabulary_size, dtype=np.float64)
        for term, n in Counter(tokens).items():
            j = self._index.get(term)
            if j is not None:
                counts[j] += n
        return counts * self.idf


def build_model(documents: Sequence[Sequence[str]], smooth_idf: bool = False) -> TfidfModel:
    """Build a TF-IDF model from tokenized documents.

    Args:
        documents: One token list per corpus entry, in corpus order.
            Documents may be empty.
        smooth_idf: Add one to every document frequency. A term then gets
            a zero or negative weight once it appears in N - 1 or more
            documents.

    Returns:
        A new TfidfModel with one matrix row per document.
    """
    n_docs = len(documents)
    if not any(len(doc) for doc in documents):
        logger.info(f"No terms in {n_docs} document(s); building empty model")
        return TfidfModel.empty(n_docs)

    vectorizer = CountVectorizer(analyzer=_identity)
    counts = vectorizer.fit_transform([list(doc) for doc in documents])
    vocabulary = [str(t) for t in vectorizer.get_feature_names_out()]

    df = np.asarray((counts > 0).sum(axis=0), dtype=np.float64).ravel()
    if smooth_idf:
        df = df + 1.0
    idf = np.log(n_docs / df)
    matrix = counts.toarray().astype(np.float64) * idf

    logger.info(f"Built TF-IDF model: {n_docs} documents, {len(vocabulary)} terms")
    return TfidfModel(vocabulary=vocabulary, idf=idf, matrix=matrix)


def project_query(text: str, model: TfidfModel, tokenizer: Tokenizer) -> np.ndarray:
    """Tokenize a query and convert it into a TF-IDF vector."""
    tokens = tokenizer.tokenize(text)
    vec = model.transform(tokens)
    if model.vocabulary_size and not vec.any():
        logger.debug(f"Query shares no weighted terms with the vocabulary: {tokens!r}")
    return vec
