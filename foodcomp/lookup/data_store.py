from __future__ import annotations

import json
from pathlib import Path

from ..data_ingestion.config import DEFAULT_INGESTION_CONFIG
from .engine import FoodLookupEngine
from .models import FoodRecord


def load_records(path: Path) -> list[FoodRecord]:
    """Read the JSON artifact written by the ingestion pipeline."""
    if not path.exists():
        raise FileNotFoundError(
            f"Missing food composition artifact: {path}\n"
            "Run `python -m foodcomp.data_ingestion.ingest` to build it."
        )
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of food records in {path}")
    return [FoodRecord.model_validate(item) for item in payload]


def load_engine(path: Path | None = None) -> FoodLookupEngine:
    """Build a fresh engine from an artifact (defaults to the configured one)."""
    return FoodLookupEngine(load_records(path or DEFAULT_INGESTION_CONFIG.processed_path))
