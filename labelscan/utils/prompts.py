"""
Prompt template builders for Gemma calls.
All prompt strings live here; services only pass data in.
"""

from __future__ import annotations

import json


# ── Ingredient classification ────────────────────────────────────────────────


def build_classification_prompt(ingredients: list[str]) -> str:
    """
    Prompt for one batch of label ingredients.

    The model must echo each ingredient name exactly so replies can be
    matched back to positions; anything it skips is classified by rules.
    """
    return f"""You are a food safety expert analysing a product's ingredient list.

## INGREDIENTS
{json.dumps(ingredients, ensure_ascii=False)}

## TASK
For each ingredient give:
1. category (e.g. "preservative", "sweetener", "natural", "coloring",
   "flavoring", "vitamin", "fat", "protein", "thickener", "emulsifier")
2. safety_rating: "safe", "caution" or "avoid"
3. confidence: integer 0-100
4. explanation: one or two sentences justifying the rating
5. health_concerns: known negative health impacts (may be empty)
6. alternatives: safer alternatives, if any
7. sources: e.g. "FDA", "EWG", "EFSA", "WHO"

Base your analysis on the FDA GRAS list, EWG Food Scores, EFSA opinions and
peer-reviewed research on food additives. Be conservative: when in doubt,
use "caution" rather than "safe".

## OUTPUT FORMAT
Output only valid JSON matching the schema below.
No markdown fences. No preamble. No explanation.
Use the ingredient names exactly as given.

{{
  "ingredients": [
    {{
      "ingredient": "Sodium Benzoate",
      "category": "preservative",
      "safety_rating": "avoid",
      "confidence": 80,
      "explanation": "...",
      "health_concerns": ["..."],
      "alternatives": ["..."],
      "sources": ["FDA"]
    }}
  ]
}}"""
