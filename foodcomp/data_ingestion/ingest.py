from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from .config import (
    CONSUMED_COLUMNS,
    DEFAULT_INGESTION_CONFIG,
    PLACEHOLDER_TOKENS,
    UNCATEGORIZED,
    IngestionConfig,
)
from .errors import DuplicateFoodCodeError, SourceLayoutError, SourceUnreadableError

logger = logging.getLogger(__name__)

RawRow = List[str]

CANONICAL_COLUMNS: List[str] = [
    "food_code",
    "name_primary",
    "name_phonetic",
    "category",
    "energy_kcal",
    "protein_g",
    "fat_g",
    "carbohydrate_g",
    "water_g",
]

_PARENTHESES = ("(", ")", "（", "）")


@dataclass(frozen=True)
class IngestionReport:
    rows_read: int
    rows_blank: int
    rows_rejected: int
    records_written: int
    output_path: Path


def parse_num(value: str | None) -> float:
    """
    Coerce a table cell to a nutrient value.

    Empty cells, placeholder tokens and anything annotated with parentheses
    (estimated values) become 0, as does anything that is not a finite number.
    """
    if value is None:
        return 0.0
    raw = str(value).strip()
    if not raw or raw in PLACEHOLDER_TOKENS:
        return 0.0
    if any(p in raw for p in _PARENTHESES):
        return 0.0
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if not np.isfinite(number):
        return 0.0
    return number


def _split_lines(text: str) -> list[str]:
    """Break on line feeds only; a trailing CR from CRLF endings is dropped."""
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _validate_layout(lines: list[str], config: IngestionConfig) -> None:
    header = [line.split(config.delimiter) for line in lines[: config.header_rows]]
    for index, fragment in config.expected_header.items():
        if not any(index < len(row) and fragment in row[index] for row in header):
            raise SourceLayoutError(
                f"Header label {fragment!r} not found in column {index}"
            )

    data = [line for line in lines[config.header_rows:] if line.strip()]
    if not data:
        return
    widest = max(len(line.split(config.delimiter)) for line in data)
    if widest < config.min_row_width:
        raise SourceLayoutError(
            f"Widest data row has {widest} cells; the column layout needs at least "
            f"{config.min_row_width}"
        )


def split_rows(text: str, config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> list[RawRow]:
    """Skip the header block and drop rows with no content at all."""
    rows: list[RawRow] = []
    for line in _split_lines(text)[config.header_rows:]:
        if not line.strip():
            continue
        cells = line.split(config.delimiter)
        if not any(cell.strip() for cell in cells):
            continue
        rows.append(cells)
    return rows


def _extract(row: RawRow, config: IngestionConfig) -> dict[str, str]:
    fields: dict[str, str] = {}
    for name in CONSUMED_COLUMNS:
        index = config.columns.get(name)
        fields[name] = row[index] if index is not None and index < len(row) else ""
    return fields


def _assign_synthetic_codes(records: pd.DataFrame) -> pd.DataFrame:
    # Keyed by position in the retained sequence, so rejected rows never consume a code.
    synthetic = pd.Series(
        [f"food_{i + 1}" for i in range(len(records))],
        index=records.index,
        dtype=object,
    )
    records["food_code"] = records["food_code"].mask(records["food_code"] == "", synthetic)
    return records


def _check_unique_codes(records: pd.DataFrame) -> None:
    codes = records["food_code"]
    duplicates = codes[codes.duplicated()].unique().tolist()
    if duplicates:
        raise DuplicateFoodCodeError([str(c) for c in duplicates])


def _records_from_rows(rows: list[RawRow], config: IngestionConfig) -> pd.DataFrame:
    raw = pd.DataFrame(
        [_extract(row, config) for row in rows],
        columns=list(CONSUMED_COLUMNS),
        dtype=object,
    ).fillna("")

    names = raw["name"].astype(str).str.strip()
    energy = raw["energy_kcal"].astype(str).str.strip()
    kcal = energy.map(parse_num).astype(float)

    admissible = (names != "") & (energy != "") & ~energy.isin(PLACEHOLDER_TOKENS)
    keep = admissible & (kcal > 0)

    if logger.isEnabledFor(logging.DEBUG):
        for name, value in zip(names[~keep], energy[~keep]):
            logger.debug("Rejected row name=%r energy_kcal=%r", name, value)

    phonetic = raw["name_phonetic"].astype(str).str.strip()
    category = raw["food_group"].astype(str).str.strip()

    records = pd.DataFrame({
        "food_code": raw["food_number"].astype(str).str.strip(),
        "name_primary": names,
        "name_phonetic": phonetic.where(phonetic != "", None),
        "category": category.where(category != "", UNCATEGORIZED),
        "energy_kcal": kcal,
        "protein_g": raw["protein"].map(parse_num).astype(float),
        "fat_g": raw["fat"].map(parse_num).astype(float),
        "carbohydrate_g": raw["carbohydrate_available"].map(parse_num).astype(float),
        "water_g": raw["water"].map(parse_num).astype(float),
    }, columns=CANONICAL_COLUMNS)

    records = records.loc[keep].reset_index(drop=True)
    records = _assign_synthetic_codes(records)
    _check_unique_codes(records)
    return records


def build_records(text: str, config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> pd.DataFrame:
    """
    Turn raw table text into the canonical record frame, in input row order.
    """
    _validate_layout(_split_lines(text), config)
    return _records_from_rows(split_rows(text, config), config)


def _write_artifact(records: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = records.to_json(orient="records", force_ascii=False, indent=2)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(payload, encoding="utf-8")
    tmp_path.replace(path)


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> IngestionReport:
    """
    Execute the ingestion pipeline.

    Steps:
    - Read the raw food composition table.
    - Validate the column layout and skip the header block.
    - Filter blank and invalid rows, coerce nutrient cells.
    - Persist the records as a JSON array, replacing any previous artifact.
    """
    try:
        text = config.raw_path.read_text(encoding=config.encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceUnreadableError(
            f"Cannot read food composition table at {config.raw_path}: {exc}"
        ) from exc

    lines = _split_lines(text)
    _validate_layout(lines, config)

    rows = split_rows(text, config)
    records = _records_from_rows(rows, config)

    rows_read = max(len(lines) - config.header_rows, 0)
    report = IngestionReport(
        rows_read=rows_read,
        rows_blank=rows_read - len(rows),
        rows_rejected=len(rows) - len(records),
        records_written=len(records),
        output_path=config.processed_path,
    )

    _write_artifact(records, config.processed_path)
    logger.info(
        "Ingested %d of %d rows (%d blank, %d rejected) into %s",
        report.records_written,
        report.rows_read,
        report.rows_blank,
        report.rows_rejected,
        report.output_path,
    )
    return report


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    result = run_ingestion()
    print(
        f"Ingestion complete. {result.records_written} records saved to: "
        f"{result.output_path}"
    )
