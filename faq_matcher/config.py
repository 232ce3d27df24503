"""Application configuration settings.

This module defines the Settings dataclass that loads configuration
from environment variables.
"""

from dataclasses import dataclass
import os


@dataclass
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        corpus_path: CSV file holding the question/answer pairs.
        question_column: Name of the question column in the corpus CSV.
        answer_column: Name of the answer column in the corpus CSV.
        model_path: Output path of the TF-IDF model table.
        idf_path: Output path of the idf table.
        word_list_path: Output path of the tokenized corpus table.
        tokenizer: Name of the tokenizer variant used for corpus and queries.
        smooth_idf: Use ln(N / (1 + df)) instead of ln(N / df) for idf.
        similarity_threshold: Scores must be strictly above this to match.
        access_key: Key callers must present. Empty rejects every caller.
        log_level: Root logging level.
        port: HTTP port for the Flask server.
    """

    corpus_path: str = "data/corpus_faq.csv"
    question_column: str = "question"
    answer_column: str = "answer"

    model_path: str = "models/model.csv"
    idf_path: str = "models/idf.csv"
    word_list_path: str = "models/word_list.csv"

    tokenizer: str = "regex"
    smooth_idf: bool = False
    similarity_threshold: float = 0.3

    access_key: str = ""
    log_level: str = "INFO"
    port: int = 5000

    @staticmethod
    def _get_bool(value: str | None, default: bool = False) -> bool:
        """Convert string value to boolean.

        Args:
            value: String value to convert.
            default: Default value if value is None.

        Returns:
            Boolean value.
        """
        if value is None:
            return default
        return value.lower() in {"1", "true", "t", "yes", "y"}

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings instance from environment variables.

        Returns:
            Settings instance with values loaded from environment.
        """
        return cls(
            corpus_path=os.getenv("FAQ_CORPUS_PATH", "data/corpus_faq.csv"),
            question_column=os.getenv("FAQ_QUESTION_COLUMN", "question"),
            answer_column=os.getenv("FAQ_ANSWER_COLUMN", "answer"),
            model_path=os.getenv("FAQ_MODEL_PATH", "models/model.csv"),
            idf_path=os.getenv("FAQ_IDF_PATH", "models/idf.csv"),
            word_list_path=os.getenv("FAQ_WORD_LIST_PATH", "models/word_list.csv"),
            tokenizer=os.getenv("FAQ_TOKENIZER", "regex"),
            smooth_idf=cls._get_bool(os.getenv("FAQ_SMOOTH_IDF"), False),
            similarity_threshold=float(os.getenv("FAQ_SIMILARITY_THRESHOLD", "0.3")),
            access_key=os.getenv("FAQ_ACCESS_KEY", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            port=int(os.getenv("PORT", "5000")),
        )
