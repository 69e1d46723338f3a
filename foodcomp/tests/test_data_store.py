from __future__ import annotations

import json
from pathlib import Path

import pytest

from foodcomp.data_ingestion.config import IngestionConfig
from foodcomp.data_ingestion.ingest import run_ingestion
from foodcomp.lookup import data_store

HEADER = [",,,,,,,,,,,,,,,,"] * 7
ROWS = [
    "07,07148,1,りんご,15,220,53,84.1,,0.1,,,0.2,12.4,,,",
    "07,07149,2,りんごジュース,0,180,43,87.7,,0.1,,,0.1,(10.5),,,",
    "01,01083,3,米,0,1500,358,14.9,,6.1,,,0.9,(0),,,",
    ",,4,謎の食品,0,100,25,,,,,,,,,,",
]


@pytest.fixture
def built_config(tmp_path: Path) -> IngestionConfig:
    cfg = IngestionConfig(
        raw_path=tmp_path / "raw" / "table.csv",
        processed_data_dir=tmp_path / "processed",
    )
    cfg.raw_path.parent.mkdir(parents=True)
    cfg.raw_path.write_text("\n".join(HEADER + ROWS) + "\n", encoding="utf-8")
    run_ingestion(config=cfg)
    return cfg


def test_load_engine_from_built_artifact(built_config):
    engine = data_store.load_engine(built_config.processed_path)

    assert len(engine) == 4
    apple = engine.get_food_by_code("07148")
    assert apple.name_primary == "りんご"
    assert apple.energy_kcal == 53

    unknown = engine.get_food_by_code("food_4")
    assert unknown.category == "未分類"
    assert unknown.name_phonetic is None

    names = [r.name_primary for r in engine.search_by_name("りんご")]
    assert names == ["りんご", "りんごジュース"]
    assert engine.get_food_by_code("07149").carbohydrate_g == 0


def test_every_built_code_round_trips(built_config):
    payload = json.loads(built_config.processed_path.read_text(encoding="utf-8"))
    engine = data_store.load_engine(built_config.processed_path)
    for item in payload:
        assert engine.get_food_by_code(item["food_code"]).model_dump() == item


def test_missing_artifact_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        data_store.load_records(tmp_path / "nope.json")


def test_invalid_json_raises_value_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(ValueError):
        data_store.load_records(path)


def test_non_array_payload_raises_value_error(tmp_path):
    path = tmp_path / "object.json"
    path.write_text('{"food_code": "1"}', encoding="utf-8")
    with pytest.raises(ValueError):
        data_store.load_records(path)


def test_load_engine_defaults_to_configured_artifact(built_config, monkeypatch):
    monkeypatch.setattr(data_store, "DEFAULT_INGESTION_CONFIG", built_config)

    first = data_store.load_engine()
    second = data_store.load_engine()

    assert len(first) == len(second) == 4
    assert first is not second
    assert not hasattr(data_store, "get_engine")
