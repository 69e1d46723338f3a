"""
Food lookup engine.

Responsibilities:
- Load the normalized food composition records into an in-memory index.
- Answer name searches with relevance ranking (exact > prefix > shorter name).
- Answer category searches and direct food_code lookups.
- Scale per-100 g nutrient values to a logged portion.
"""
