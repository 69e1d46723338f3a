from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..data_ingestion.config import UNCATEGORIZED

# Composition table values are per 100 g of edible portion.
BASIS_G = 100.0


class NutrientPortion(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount_g: float = Field(..., gt=0.0)
    energy_kcal: int
    protein_g: float
    fat_g: float
    carbohydrate_g: float


class FoodRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    food_code: str = Field(..., min_length=1)
    name_primary: str = Field(..., min_length=1)
    name_phonetic: str | None = Field(
        default=None, description="Phonetic reading, used for matching only"
    )
    category: str = UNCATEGORIZED
    energy_kcal: float = Field(..., ge=0.0, allow_inf_nan=False)
    protein_g: float = Field(default=0.0, allow_inf_nan=False)
    fat_g: float = Field(default=0.0, allow_inf_nan=False)
    carbohydrate_g: float = Field(default=0.0, allow_inf_nan=False)
    water_g: float = Field(default=0.0, allow_inf_nan=False)

    def for_amount(self, amount_g: float) -> NutrientPortion:
        """Scale this record's per-100 g values to ``amount_g`` grams."""
        if amount_g <= 0:
            raise ValueError(f"amount_g must be positive, got {amount_g}")
        ratio = amount_g / BASIS_G
        return NutrientPortion(
            amount_g=amount_g,
            energy_kcal=round(self.energy_kcal * ratio),
            protein_g=round(self.protein_g * ratio, 1),
            fat_g=round(self.fat_g * ratio, 1),
            carbohydrate_g=round(self.carbohydrate_g * ratio, 1),
        )
