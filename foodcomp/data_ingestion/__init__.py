"""
Data ingestion package for the food composition dataset.

Responsibilities:
- Read the raw food composition table (one row per food item).
- Normalize each admitted row into the canonical FoodRecord schema.
- Persist the cleaned dataset as a JSON artifact for the lookup engine.
"""
