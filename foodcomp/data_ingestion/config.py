from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from dotenv import load_dotenv

_PACKAGE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root
load_dotenv(_PACKAGE_DIR.parent / ".env")

# Column layout of the 2023 food composition table. Only part of it is consumed.
SOURCE_COLUMNS: Mapping[str, int | None] = MappingProxyType({
    "food_group": 0,
    "food_number": 1,
    "index_number": 2,
    "name": 3,
    "name_phonetic": None,
    "waste_rate": 4,
    "energy_kj": 5,
    "energy_kcal": 6,
    "water": 7,
    "protein_aac": 8,
    "protein": 9,
    "fat_tag": 10,
    "cholesterol": 11,
    "fat": 12,
    "carbohydrate_available": 13,
    "carbohydrate_sugar": 14,
    "carbohydrate_starch": 15,
    "carbohydrate_other": 16,
})

CONSUMED_COLUMNS: tuple[str, ...] = (
    "food_group",
    "food_number",
    "name",
    "name_phonetic",
    "energy_kcal",
    "water",
    "protein",
    "fat",
    "carbohydrate_available",
)

# "not measured", "trace amount", "parenthesized estimate"
PLACEHOLDER_TOKENS: frozenset[str] = frozenset({"-", "Tr", "(0)"})

UNCATEGORIZED = "未分類"


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for the food composition ingestion pipeline.
    """

    raw_path: Path = Path(
        os.getenv(
            "FOODCOMP_RAW_PATH",
            str(_PACKAGE_DIR / "data" / "raw" / "food_composition_2023.csv"),
        )
    )
    processed_data_dir: Path = Path(
        os.getenv("FOODCOMP_PROCESSED_DIR", str(_PACKAGE_DIR / "data" / "processed"))
    )
    processed_filename: str = "japanese-food-composition-2023.json"
    header_rows: int = 7
    delimiter: str = ","
    encoding: str = "utf-8-sig"
    columns: Mapping[str, int | None] = field(default_factory=lambda: SOURCE_COLUMNS)
    expected_header: Mapping[int, str] = field(default_factory=dict)

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename

    @property
    def min_row_width(self) -> int:
        """Number of cells a row needs to carry every consumed column."""
        indices = [self.columns[name] for name in CONSUMED_COLUMNS]
        return max(i for i in indices if i is not None) + 1


DEFAULT_INGESTION_CONFIG = IngestionConfig()
