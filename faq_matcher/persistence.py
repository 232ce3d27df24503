"""CSV persistence for the trained model and the tokenized corpus.

Three resources, all written with every field quoted:

* model table: header ``id, term_1 .. term_M``, then ``doc_id, w_1 .. w_M``
  per document
* idf table: header ``term, idf``, then one row per vocabulary term in
  vocabulary order
* word list: one variable-length row of tokens per document, no header

Weights are written with 17 significant digits so a float64 survives the
round trip unchanged.
"""

import csv
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import ModelDecodeError
from .tfidf import TfidfModel

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Table = List[List[str]]

ID_COLUMN = "id"
IDF_HEADER = ["term", "idf"]
FLOAT_FORMAT = "%.17g"


def _format_float(value: float) -> str:
    return FLOAT_FORMAT % value


def _parse_float(cell: str, where: str) -> float:
    try:
        return float(cell)
    except (TypeError, ValueError):
        raise ModelDecodeError(f"Non-numeric value {cell!r} at {where}") from None


# --------------------------------------------------
# ENCODE / DECODE (IN-MEMORY TABLES)
# --------------------------------------------------

def encode_model(model: TfidfModel) -> Tuple[Table, Table]:
    """Return (model_rows, idf_rows) as tables of strings."""
    model_rows = [[ID_COLUMN] + list(model.vocabulary)]
    for doc_id, weights in enumerate(model.matrix):
        model_rows.append([str(doc_id)] + [_format_float(w) for w in weights])

    idf_rows = [list(IDF_HEADER)]
    idf_rows.extend([term, _format_float(w)] for term, w in zip(model.vocabulary, model.idf))
    return model_rows, idf_rows


def decode_model(model_rows: Sequence[Sequence[str]], idf_rows: Sequence[Sequence[str]]) -> TfidfModel:
    """Rebuild a TfidfModel from the tables produced by ``encode_model``."""
    if not model_rows:
        raise ModelDecodeError("Model table is empty (no header row)")
    header = list(model_rows[0])
    if not header or header[0] != ID_COLUMN:
        raise ModelDecodeError(f"Model header must start with '{ID_COLUMN}', got {header[:1]}")
    vocabulary = header[1:]
    width = len(header)

    matrix = []
    for i, row in enumerate(model_rows[1:]):
        if len(row) != width:
            raise ModelDecodeError(
                f"Model row {i} has {len(row)} fields, header has {width}"
            )
        if row[0] != str(i):
            raise ModelDecodeError(f"Model row {i} has id {row[0]!r}, expected {i}")
        matrix.append([
            _parse_float(cell, f"model row {i}, column {vocabulary[j]!r}")
            for j, cell in enumerate(row[1:])
        ])

    if not idf_rows or list(idf_rows[0]) != IDF_HEADER:
        raise ModelDecodeError(f"IDF table header must be {IDF_HEADER}")
    idf_body = idf_rows[1:]
    terms = [row[0] if row else "" for row in idf_body]
    if terms != vocabulary:
        raise ModelDecodeError(
            f"IDF table terms do not match the model vocabulary "
            f"({len(terms)} vs {len(vocabulary)} terms)"
        )
    idf = []
    for row in idf_body:
        if len(row) != 2:
            raise ModelDecodeError(f"IDF row for {row[0]!r} has {len(row)} fields, expected 2")
        idf.append(_parse_float(row[1], f"idf of {row[0]!r}"))

    return TfidfModel(
        vocabulary=vocabulary,
        idf=np.array(idf, dtype=np.float64),
        matrix=np.array(matrix, dtype=np.float64).reshape(len(matrix), len(vocabulary)),
    )


# --------------------------------------------------
# FILE I/O
# --------------------------------------------------

def _stage(path: PathLike, write: Callable[[str], None]) -> str:
    """Write to a temporary file next to ``path`` and return its name."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    os.close(fd)
    try:
        write(tmp)
    except BaseException:
        os.unlink(tmp)
        raise
    return tmp


def _commit(staged: Sequence[Tuple[str, PathLike]]) -> None:
    for tmp, path in staged:
        os.replace(tmp, path)
        logger.info(f"Wrote {path}")


def _discard(staged: Sequence[Tuple[str, PathLike]]) -> None:
    for tmp, _ in staged:
        if os.path.exists(tmp):
            os.unlink(tmp)


def _table_writer(rows: Table) -> Callable[[str], None]:
    def write(tmp: str) -> None:
        pd.DataFrame(rows).to_csv(tmp, header=False, index=False, quoting=csv.QUOTE_ALL)
    return write


def _documents_writer(documents: Sequence[Sequence[str]]) -> Callable[[str], None]:
    def write(tmp: str) -> None:
        # rows are ragged, which a DataFrame would pad
        with open(tmp, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_ALL)
            for doc in documents:
                writer.writerow(list(doc))
    return write


def _read_table(path: PathLike, name: str) -> Table:
    path = Path(path)
    try:
        df = pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
    except FileNotFoundError as e:
        raise ModelDecodeError(f"{name} not found: {path}") from e
    except pd.errors.EmptyDataError as e:
        raise ModelDecodeError(f"{name} is empty: {path}") from e
    except pd.errors.ParserError as e:
        raise ModelDecodeError(f"Could not parse {name} {path}: {e}") from e

    rows = df.astype(object).values.tolist()
    for i, row in enumerate(rows):
        if any(not isinstance(cell, str) for cell in row):
            raise ModelDecodeError(f"{name} row {i} is shorter than the header: {path}")
    return rows


def save_model(model: TfidfModel, model_path: PathLike, idf_path: PathLike) -> None:
    """Write the model and idf tables, replacing both only once both are written."""
    save_trained(model, None, model_path, idf_path, None)


def load_model(model_path: PathLike, idf_path: PathLike) -> TfidfModel:
    """Read the model and idf tables written by ``save_model``."""
    model = decode_model(
        _read_table(model_path, "Model table"),
        _read_table(idf_path, "IDF table"),
    )
    logger.info(
        f"Loaded model from {model_path}: "
        f"{model.num_documents} documents, {model.vocabulary_size} terms"
    )
    return model


def save_documents(documents: Sequence[Sequence[str]], path: PathLike) -> None:
    """Write the tokenized corpus, one row per document."""
    _commit([(_stage(path, _documents_writer(documents)), path)])


def load_documents(path: PathLike) -> List[List[str]]:
    """Read the tokenized corpus written by ``save_documents``."""
    try:
        with open(path, encoding="utf-8", newline="") as f:
            documents = [row for row in csv.reader(f)]
    except FileNotFoundError as e:
        raise ModelDecodeError(f"Word list not found: {path}") from e
    except csv.Error as e:
        raise ModelDecodeError(f"Could not parse word list {path}: {e}") from e
    logger.info(f"Loaded {len(documents)} tokenized documents from {path}")
    return documents


def save_trained(
    model: TfidfModel,
    documents: Optional[Sequence[Sequence[str]]],
    model_path: PathLike,
    idf_path: PathLike,
    word_list_path: Optional[PathLike],
) -> None:
    """Persist a training run.

    Every table is written to a temporary file first. The live files are
    replaced only after all of them were written, so a failure leaves the
    previous model in place.

    The replacements themselves happen one file at a time. A crash between
    two of them can leave tables from different runs side by side;
    ``service.predict`` rejects such a mix with ``ModelDecodeError``.
    """
    model_rows, idf_rows = encode_model(model)
    jobs = [(model_path, _table_writer(model_rows)), (idf_path, _table_writer(idf_rows))]
    if documents is not None and word_list_path is not None:
        jobs.append((word_list_path, _documents_writer(documents)))

    staged: List[Tuple[str, PathLike]] = []
    try:
        for path, write in jobs:
            staged.append((_stage(path, write), path))
    except BaseException:
        _discard(staged)
        raise
    _commit(staged)
