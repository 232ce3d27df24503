# This file marks the faq_matcher directory as a Python package
# Public entry points for training and querying the FAQ model

from .config import Settings
from .errors import (
    FaqMatcherError,
    CorpusReadError,
    TokenizationError,
    ModelDecodeError,
    EmptyQueryError,
)
from .tfidf import TfidfModel, build_model, project_query
from .retrieval import Match, rank, filter_matches
from .service import train, predict

__all__ = [
    'Settings',
    'FaqMatcherError', 'CorpusReadError', 'TokenizationError',
    'ModelDecodeError', 'EmptyQueryError',
    'TfidfModel', 'build_model', 'project_query',
    'Match', 'rank', 'filter_matches',
    'train', 'predict',
]
