"""End-to-end training and prediction runs.

Both operations are synchronous and keep no state between calls: training
rebuilds everything from the corpus and overwrites the persisted tables,
prediction reads them back read-only.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .config import Settings
from .corpus import load_corpus
from .errors import EmptyQueryError, ModelDecodeError
from .persistence import load_documents, load_model, save_trained
from .retrieval import Match, filter_matches, rank
from .tfidf import TfidfModel, build_model, project_query
from .tokenizers import Tokenizer, get_tokenizer

logger = logging.getLogger(__name__)


@dataclass
class TrainResult:
    documents: int
    vocabulary_size: int

    def to_dict(self) -> dict:
        return {
            "status": "trained",
            "documents": self.documents,
            "vocabulary_size": self.vocabulary_size,
        }


@dataclass
class PredictResult:
    query: str
    scored: List[Tuple[int, float]] = field(repr=False)
    matches: List[Match]

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "matches": [m.to_dict() for m in self.matches],
        }


def train(settings: Settings, tokenizer: Optional[Tokenizer] = None) -> TrainResult:
    """Rebuild the model from the corpus and persist it.

    Nothing is written unless the corpus loads, every question tokenizes
    and the model builds.
    """
    tokenizer = tokenizer or get_tokenizer(settings.tokenizer)
    corpus = load_corpus(settings.corpus_path, settings.question_column, settings.answer_column)

    documents = [tokenizer.tokenize(record.question) for record in corpus]
    model = build_model(documents, smooth_idf=settings.smooth_idf)

    save_trained(
        model,
        documents,
        settings.model_path,
        settings.idf_path,
        settings.word_list_path,
    )
    logger.info(
        f"Training finished: {model.num_documents} documents, "
        f"{model.vocabulary_size} terms ({tokenizer.name} tokenizer)"
    )
    return TrainResult(documents=model.num_documents, vocabulary_size=model.vocabulary_size)


def _check_tables_agree(model: TfidfModel, documents: List[List[str]]) -> None:
    """Each model row must be reproducible from its word-list row and the idf table."""
    vocabulary = set(model.vocabulary)
    seen = set()
    for i, doc in enumerate(documents):
        seen.update(doc)
        if not vocabulary.issuperset(doc) or not np.allclose(
            model.transform(doc), model.matrix[i], rtol=1e-12, atol=0.0
        ):
            raise ModelDecodeError(
                f"Model row {i} does not match the word list and idf table. Retrain the model."
            )
    if seen != vocabulary:
        raise ModelDecodeError(
            "Model vocabulary does not match the word list. Retrain the model."
        )


def predict(
    settings: Settings,
    query: str,
    tokenizer: Optional[Tokenizer] = None,
) -> PredictResult:
    """Score a query against the persisted model.

    Raises:
        EmptyQueryError: the query is missing or blank.
        ModelDecodeError: the persisted tables are unreadable or were
            trained on a corpus of a different size, or the model, idf
            and word-list tables come from different training runs.
    """
    if not query or not query.strip():
        raise EmptyQueryError("Query text is required for prediction")

    tokenizer = tokenizer or get_tokenizer(settings.tokenizer)
    corpus = load_corpus(settings.corpus_path, settings.question_column, settings.answer_column)
    model = load_model(settings.model_path, settings.idf_path)
    documents = load_documents(settings.word_list_path)

    if not (len(corpus) == model.num_documents == len(documents)):
        raise ModelDecodeError(
            f"Model is stale: corpus has {len(corpus)} entries, model has "
            f"{model.num_documents} rows, word list has {len(documents)} documents. "
            f"Retrain the model."
        )
    _check_tables_agree(model, documents)

    query_vector = project_query(query, model, tokenizer)
    scored = rank(model.matrix, query_vector)
    matches = filter_matches(scored, corpus, settings.similarity_threshold)
    logger.info(
        f"Query matched {len(matches)} of {len(corpus)} entries "
        f"(threshold {settings.similarity_threshold})"
    )
    return PredictResult(query=query, scored=scored, matches=matches)
