import csv
import os

import pytest

from faq_matcher.errors import ModelDecodeError
from faq_matcher.persistence import (
    decode_model,
    encode_model,
    load_documents,
    load_model,
    save_documents,
    save_model,
    save_trained,
)
from faq_matcher.tfidf import TfidfModel, build_model


DOCS = [
    ["store", "hours"],
    ["return", "policy", "policy"],
    [],
    ["gift", "card", "store"],
]


def assert_same_model(a: TfidfModel, b: TfidfModel):
    assert a == b
    assert a.vocabulary == b.vocabulary


def test_model_round_trip_is_exact(tmp_path):
    model = build_model(DOCS)
    save_model(model, tmp_path / "model.csv", tmp_path / "idf.csv")

    loaded = load_model(tmp_path / "model.csv", tmp_path / "idf.csv")

    assert_same_model(model, loaded)


def test_empty_model_round_trip(tmp_path):
    model = build_model([])
    save_model(model, tmp_path / "model.csv", tmp_path / "idf.csv")

    loaded = load_model(tmp_path / "model.csv", tmp_path / "idf.csv")

    assert loaded.vocabulary == []
    assert loaded.matrix.shape == (0, 0)


def test_model_table_layout(tmp_path):
    """Header is id + terms, each row is the document id + its weights"""
    model = build_model(DOCS)
    save_model(model, tmp_path / "model.csv", tmp_path / "idf.csv")

    with open(tmp_path / "model.csv", newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))

    assert rows[0] == ["id"] + model.vocabulary
    assert [r[0] for r in rows[1:]] == ["0", "1", "2", "3"]
    assert all(len(r) == len(rows[0]) for r in rows)


def test_encode_decode_in_memory():
    model = build_model(DOCS, smooth_idf=True)
    model_rows, idf_rows = encode_model(model)

    assert idf_rows[0] == ["term", "idf"]
    assert_same_model(model, decode_model(model_rows, idf_rows))


def test_non_numeric_weight_is_fatal():
    model_rows, idf_rows = encode_model(build_model(DOCS))
    model_rows[1][1] = "abc"

    with pytest.raises(ModelDecodeError):
        decode_model(model_rows, idf_rows)


def test_row_width_mismatch_is_fatal():
    model_rows, idf_rows = encode_model(build_model(DOCS))
    model_rows[2] = model_rows[2][:-1]

    with pytest.raises(ModelDecodeError):
        decode_model(model_rows, idf_rows)


def test_header_must_start_with_id():
    model_rows, idf_rows = encode_model(build_model(DOCS))
    model_rows[0][0] = "doc"

    with pytest.raises(ModelDecodeError):
        decode_model(model_rows, idf_rows)


def test_idf_terms_must_match_vocabulary():
    model_rows, idf_rows = encode_model(build_model(DOCS))
    idf_rows.pop()

    with pytest.raises(ModelDecodeError):
        decode_model(model_rows, idf_rows)


def test_short_row_on_disk_is_fatal(tmp_path):
    model = build_model(DOCS)
    save_model(model, tmp_path / "model.csv", tmp_path / "idf.csv")
    lines = (tmp_path / "model.csv").read_text(encoding="utf-8").splitlines()
    lines[1] = '"0","1.5"'
    (tmp_path / "model.csv").write_text("\n".join(lines) + "\n", encoding="utf-8")

    with pytest.raises(ModelDecodeError):
        load_model(tmp_path / "model.csv", tmp_path / "idf.csv")


def test_missing_model_file(tmp_path):
    with pytest.raises(ModelDecodeError):
        load_model(tmp_path / "nope.csv", tmp_path / "idf.csv")


def test_documents_round_trip_keeps_order_and_empty_rows(tmp_path):
    docs = DOCS + [["a, b", 'say "hi"', ""]]
    save_documents(docs, tmp_path / "word_list.csv")

    assert load_documents(tmp_path / "word_list.csv") == docs


def test_failed_save_keeps_previous_model(tmp_path):
    paths = (tmp_path / "model.csv", tmp_path / "idf.csv", tmp_path / "word_list.csv")
    old = build_model(DOCS)
    save_trained(old, DOCS, *paths)

    new = build_model([["other"]])
    with pytest.raises(TypeError):
        # second document is not iterable, so writing the word list fails
        save_trained(new, [["other"], 5], *paths)

    assert_same_model(old, load_model(paths[0], paths[1]))
    assert load_documents(paths[2]) == DOCS
    assert sorted(os.listdir(tmp_path)) == ["idf.csv", "model.csv", "word_list.csv"]


def test_decoded_model_compares_equal():
    model = build_model(DOCS)

    assert decode_model(*encode_model(model)) == model
    assert decode_model(*encode_model(build_model([]))) == build_model([])
    assert build_model(DOCS, smooth_idf=True) != model
