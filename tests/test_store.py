import json

import pytest

from tpo_pricing.extractor import ExtractionError, extract
from tpo_pricing.presets import MODEL_KEY
from tpo_pricing.store import ModelStore, deserialize, serialize


def test_serialize_round_trip(workbook):
    model = extract(workbook)
    record = json.loads(json.dumps(serialize(model)))
    restored = deserialize(record)
    assert restored == model
    assert [r.rate for r in restored.programs["conventional"].grids["30yr"].rows] == [6.0, 6.5, 7.0]


def test_deserialize_accepts_json_text(workbook):
    model = extract(workbook)
    assert deserialize(model.model_dump_json()) == model


@pytest.mark.parametrize(
    "record",
    [
        None,
        "not json",
        {"programs": "nope"},
        {"programs": {"conventional": {"id": "conventional", "grids": {"30yr": {"rows": [{"rate": -1, "price": 100}]}}}}},
        {"programs": {"heloc": {"id": "heloc"}}},
        {"programs": {"va": {"id": "va"}}},
        {"programs": {"fha": {"id": "conventional", "grids": {"30yr": {"rows": [{"rate": 6.0, "price": 100.0}]}}}}},
        {"programs": {"fha": {"id": "fha", "grids": {"30yr": {"rows": []}}}}},
    ],
)
def test_invalid_records_mean_no_model(record):
    assert deserialize(record) is None


def test_replace_persists_and_load_restores(tmp_path, workbook):
    path = tmp_path / "store.json"
    model = extract(workbook)
    ModelStore(path).replace(model)
    data = json.loads(path.read_text())
    assert MODEL_KEY in data
    fresh = ModelStore(path)
    assert fresh.current is None
    assert fresh.load() == model
    assert fresh.current == model


def test_load_missing_or_corrupt_file(tmp_path):
    assert ModelStore(tmp_path / "missing.json").load() is None
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json")
    store = ModelStore(corrupt)
    assert store.load() is None
    assert store.current is None


def test_invalid_stored_record_is_not_applied(tmp_path, workbook):
    path = tmp_path / "store.json"
    store = ModelStore(path)
    model = extract(workbook)
    store.replace(model)
    path.write_text(json.dumps({MODEL_KEY: {"programs": {"fha": {"id": "heloc"}}}}))
    assert store.load() is None
    assert store.current == model


def test_other_keys_are_preserved(tmp_path, workbook):
    path = tmp_path / "store.json"
    path.write_text(json.dumps({"other": 1}))
    ModelStore(path).replace(extract(workbook))
    data = json.loads(path.read_text())
    assert data["other"] == 1
    assert MODEL_KEY in data


def test_failed_ingest_keeps_previous_model(workbook):
    store = ModelStore()
    first = store.ingest(workbook)
    with pytest.raises(ExtractionError):
        store.ingest({"Notes": [["nothing to see"]]})
    assert store.current == first


def test_replace_takes_a_copy(workbook):
    store = ModelStore()
    model = extract(workbook)
    store.replace(model)
    del model.programs["fha"]
    assert "fha" in store.current.programs


def test_clear(tmp_path, workbook):
    path = tmp_path / "store.json"
    store = ModelStore(path)
    store.replace(extract(workbook))
    store.clear()
    assert store.current is None
    assert MODEL_KEY not in json.loads(path.read_text())
    assert ModelStore(path).load() is None
