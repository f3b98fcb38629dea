"""
Seed ingredient knowledge — single source of truth for the built-in KnowledgeBase.
Extra entries can be layered on top from a JSON file (KNOWLEDGE_BASE_PATH).
"""

from typing import Any

# Each record maps onto schemas.analysis.IngredientEntry
SEED_INGREDIENTS: list[dict[str, Any]] = [
    # ── Natural ──────────────────────────────────────────────────────────────
    {
        "name": "Water",
        "category": "natural",
        "safety_rating": "safe",
        "confidence": 100,
        "explanation": "Water is essential for life and poses no safety concerns.",
        "sources": ["FDA", "EWG"],
    },
    {
        "name": "Salt",
        "category": "mineral",
        "safety_rating": "safe",
        "confidence": 85,
        "explanation": "Safe in normal amounts; high sodium intake is linked to raised blood pressure.",
        "health_concerns": ["High blood pressure in excess"],
        "alternatives": ["Potassium chloride blends", "Herbs and spices"],
        "sources": ["WHO", "American Heart Association"],
    },
    {
        "name": "Gum Arabic",
        "category": "thickener",
        "safety_rating": "safe",
        "confidence": 90,
        "explanation": "Natural fiber that acts as a thickener and stabilizer. Generally safe for consumption.",
        "sources": ["FDA"],
    },
    {
        "name": "Baking Soda",
        "category": "leavening",
        "safety_rating": "safe",
        "confidence": 90,
        "explanation": "Sodium bicarbonate leavening agent, generally recognized as safe.",
        "sources": ["FDA GRAS list"],
    },
    # ── Sweeteners ───────────────────────────────────────────────────────────
    {
        "name": "Sugar",
        "category": "sweetener",
        "safety_rating": "caution",
        "confidence": 85,
        "explanation": "Added sugar contributes to weight gain, dental decay and blood sugar spikes.",
        "health_concerns": ["Weight gain", "Dental health", "Blood sugar spikes"],
        "alternatives": ["Stevia", "Monk fruit", "Erythritol"],
        "sources": ["WHO", "American Heart Association"],
    },
    {
        "name": "Organic Cane Sugar",
        "category": "sweetener",
        "safety_rating": "caution",
        "confidence": 85,
        "explanation": (
            "High sugar content may contribute to weight gain and dental issues. "
            "Moderate consumption recommended."
        ),
        "health_concerns": ["Weight gain", "Dental health", "Blood sugar spikes"],
        "alternatives": ["Stevia", "Monk fruit", "Erythritol"],
        "sources": ["EWG", "WHO"],
    },
    {
        "name": "High Fructose Corn Syrup",
        "category": "sweetener",
        "safety_rating": "avoid",
        "confidence": 90,
        "explanation": (
            "Linked to obesity, diabetes, and metabolic syndrome. "
            "Processed differently than regular sugar."
        ),
        "health_concerns": ["Obesity", "Diabetes risk", "Metabolic syndrome", "Liver damage"],
        "alternatives": ["Pure maple syrup", "Honey", "Coconut sugar"],
        "sources": ["EWG", "American Heart Association"],
    },
    {
        "name": "Aspartame",
        "category": "sweetener",
        "safety_rating": "avoid",
        "confidence": 75,
        "explanation": (
            "Artificial sweetener classified by IARC as possibly carcinogenic (Group 2B); "
            "unsafe for people with phenylketonuria."
        ),
        "health_concerns": ["Possible carcinogen", "Phenylketonuria risk", "Headaches"],
        "alternatives": ["Stevia", "Monk fruit"],
        "sources": ["IARC", "FDA"],
    },
    {
        "name": "Sucralose",
        "category": "sweetener",
        "safety_rating": "caution",
        "confidence": 70,
        "explanation": "Approved artificial sweetener; emerging studies suggest effects on gut bacteria.",
        "health_concerns": ["Gut microbiome changes"],
        "alternatives": ["Stevia", "Monk fruit"],
        "sources": ["FDA", "Peer-reviewed studies"],
    },
    {
        "name": "Stevia",
        "category": "sweetener",
        "safety_rating": "safe",
        "confidence": 85,
        "explanation": "Plant-derived zero-calorie sweetener; purified extracts are generally recognized as safe.",
        "sources": ["FDA GRAS list"],
    },
    # ── Preservatives ────────────────────────────────────────────────────────
    {
        "name": "Citric Acid",
        "category": "preservative",
        "safety_rating": "safe",
        "confidence": 95,
        "explanation": "Commonly used preservative and flavor enhancer, generally recognized as safe by FDA.",
        "sources": ["FDA"],
    },
    {
        "name": "Sodium Benzoate",
        "category": "preservative",
        "safety_rating": "avoid",
        "confidence": 80,
        "explanation": (
            "May form benzene (a carcinogen) when combined with vitamin C. "
            "Can cause hyperactivity in children."
        ),
        "health_concerns": [
            "Potential carcinogen formation",
            "Hyperactivity in children",
            "Allergic reactions",
        ],
        "alternatives": ["Potassium sorbate", "Vitamin E", "Rosemary extract"],
        "sources": ["EWG", "Scientific Studies"],
    },
    {
        "name": "Potassium Sorbate",
        "category": "preservative",
        "safety_rating": "safe",
        "confidence": 80,
        "explanation": "Mold and yeast inhibitor with a long safety record at permitted levels.",
        "health_concerns": ["Rare skin sensitivity"],
        "sources": ["FDA GRAS list", "EFSA"],
    },
    {
        "name": "Sodium Nitrite",
        "category": "preservative",
        "safety_rating": "avoid",
        "confidence": 80,
        "explanation": "Cured-meat preservative that can form carcinogenic nitrosamines when cooked at high heat.",
        "health_concerns": ["Nitrosamine formation", "Colorectal cancer risk"],
        "alternatives": ["Uncured products", "Celery powder (still nitrite-bearing)"],
        "sources": ["WHO IARC", "EWG"],
    },
    {
        "name": "BHA",
        "category": "preservative",
        "safety_rating": "avoid",
        "confidence": 75,
        "explanation": "Butylated hydroxyanisole is listed as reasonably anticipated to be a human carcinogen.",
        "health_concerns": ["Possible carcinogen", "Endocrine disruption"],
        "alternatives": ["Vitamin E (tocopherols)", "Rosemary extract"],
        "sources": ["National Toxicology Program", "EWG"],
    },
    {
        "name": "BHT",
        "category": "preservative",
        "safety_rating": "caution",
        "confidence": 70,
        "explanation": "Synthetic antioxidant with mixed evidence from animal studies.",
        "health_concerns": ["Mixed animal study results"],
        "alternatives": ["Vitamin E (tocopherols)", "Rosemary extract"],
        "sources": ["EWG", "EFSA"],
    },
    {
        "name": "TBHQ",
        "category": "preservative",
        "safety_rating": "avoid",
        "confidence": 70,
        "explanation": "Petroleum-derived antioxidant; high doses have shown immune effects in animal studies.",
        "health_concerns": ["Immune system effects", "Vision disturbances at high doses"],
        "alternatives": ["Vitamin E (tocopherols)", "Rosemary extract"],
        "sources": ["EWG", "Peer-reviewed studies"],
    },
    # ── Colorings ────────────────────────────────────────────────────────────
    {
        "name": "Artificial Color Red 40",
        "category": "coloring",
        "safety_rating": "avoid",
        "confidence": 85,
        "explanation": (
            "Linked to hyperactivity in children and may cause allergic reactions. "
            "Banned in some countries."
        ),
        "health_concerns": [
            "Hyperactivity in children",
            "Allergic reactions",
            "Potential behavioral issues",
        ],
        "alternatives": ["Beet juice", "Paprika extract", "Annatto"],
        "sources": ["EWG", "European Food Safety Authority"],
    },
    {
        "name": "Artificial Color Yellow 5",
        "category": "coloring",
        "safety_rating": "avoid",
        "confidence": 80,
        "explanation": "Tartrazine; requires a warning label in the EU for effects on activity in children.",
        "health_concerns": ["Hyperactivity in children", "Allergic reactions"],
        "alternatives": ["Turmeric", "Saffron", "Annatto"],
        "sources": ["EWG", "European Food Safety Authority"],
    },
    {
        "name": "Artificial Color Blue 1",
        "category": "coloring",
        "safety_rating": "caution",
        "confidence": 70,
        "explanation": "Brilliant Blue FCF; approved but part of the synthetic dye group many consumers avoid.",
        "health_concerns": ["Allergic reactions"],
        "alternatives": ["Spirulina extract", "Butterfly pea flower"],
        "sources": ["FDA", "EWG"],
    },
    {
        "name": "Caramel Color",
        "category": "coloring",
        "safety_rating": "caution",
        "confidence": 70,
        "explanation": "Some classes contain 4-MEI, a by-product listed as a possible carcinogen.",
        "health_concerns": ["4-MEI contamination"],
        "alternatives": ["Products without added color"],
        "sources": ["IARC", "Consumer Reports"],
    },
    # ── Flavorings ───────────────────────────────────────────────────────────
    {
        "name": "Natural Flavors",
        "category": "flavoring",
        "safety_rating": "caution",
        "confidence": 70,
        "explanation": (
            'While generally safe, "natural flavors" can be vague and may contain '
            "allergens or chemicals not listed."
        ),
        "health_concerns": ["Hidden allergens", "Undefined chemicals"],
        "alternatives": ["Specific spices", "Fruit extracts", "Essential oils"],
        "sources": ["FDA", "EWG"],
    },
    {
        "name": "Monosodium Glutamate",
        "category": "flavor enhancer",
        "safety_rating": "caution",
        "confidence": 70,
        "explanation": "Generally recognized as safe; some people report short-term sensitivity symptoms.",
        "health_concerns": ["Reported sensitivity symptoms", "Sodium content"],
        "alternatives": ["Mushroom powder", "Seaweed", "Tomato paste"],
        "sources": ["FDA", "EFSA"],
    },
    # ── Vitamins & minerals ──────────────────────────────────────────────────
    {
        "name": "Ascorbic Acid",
        "category": "vitamin",
        "safety_rating": "safe",
        "confidence": 100,
        "explanation": "Essential vitamin with antioxidant properties. Beneficial for immune system health.",
        "sources": ["FDA", "NIH"],
    },
    {
        "name": "Tocopherols",
        "category": "vitamin",
        "safety_rating": "safe",
        "confidence": 95,
        "explanation": "Vitamin E compounds used as natural antioxidants.",
        "sources": ["NIH", "FDA"],
    },
    {
        "name": "Niacin",
        "category": "vitamin",
        "safety_rating": "safe",
        "confidence": 95,
        "explanation": "Vitamin B3, added to enriched grains.",
        "sources": ["NIH"],
    },
    {
        "name": "Thiamine Mononitrate",
        "category": "vitamin",
        "safety_rating": "safe",
        "confidence": 95,
        "explanation": "Vitamin B1, added to enriched grains.",
        "sources": ["NIH"],
    },
    {
        "name": "Riboflavin",
        "category": "vitamin",
        "safety_rating": "safe",
        "confidence": 95,
        "explanation": "Vitamin B2, added to enriched grains.",
        "sources": ["NIH"],
    },
    {
        "name": "Folic Acid",
        "category": "vitamin",
        "safety_rating": "safe",
        "confidence": 95,
        "explanation": "Synthetic folate; fortification reduces neural tube defects.",
        "sources": ["NIH", "CDC"],
    },
    {
        "name": "Reduced Iron",
        "category": "mineral",
        "safety_rating": "safe",
        "confidence": 90,
        "explanation": "Iron fortificant used in enriched flour.",
        "sources": ["NIH"],
    },
    # ── Grains, fats, emulsifiers, thickeners ────────────────────────────────
    {
        "name": "Enriched Flour",
        "category": "grain",
        "safety_rating": "caution",
        "confidence": 75,
        "explanation": "Processed flour with added vitamins. Lower nutritional value than whole grain alternatives.",
        "health_concerns": ["Blood sugar spikes", "Lower fiber content", "Reduced nutrients"],
        "alternatives": ["Whole wheat flour", "Almond flour", "Oat flour"],
        "sources": ["FDA", "Nutrition experts"],
    },
    {
        "name": "Palm Oil",
        "category": "fat",
        "safety_rating": "caution",
        "confidence": 75,
        "explanation": "High in saturated fat; sourcing is also linked to deforestation.",
        "health_concerns": ["Saturated fat", "Cardiovascular risk in excess"],
        "alternatives": ["Olive oil", "Avocado oil"],
        "sources": ["American Heart Association", "WWF"],
    },
    {
        "name": "Partially Hydrogenated Oil",
        "category": "fat",
        "safety_rating": "avoid",
        "confidence": 95,
        "explanation": "Primary source of artificial trans fat; no longer recognized as safe by the FDA.",
        "health_concerns": ["Heart disease", "Raised LDL cholesterol"],
        "alternatives": ["Olive oil", "Butter", "Coconut oil"],
        "sources": ["FDA", "American Heart Association"],
    },
    {
        "name": "Soy Lecithin",
        "category": "emulsifier",
        "safety_rating": "safe",
        "confidence": 85,
        "explanation": "Common emulsifier; safe for most people but derived from soy (an allergen).",
        "health_concerns": ["Soy allergy"],
        "alternatives": ["Sunflower lecithin"],
        "sources": ["FDA"],
    },
    {
        "name": "Xanthan Gum",
        "category": "thickener",
        "safety_rating": "safe",
        "confidence": 85,
        "explanation": "Fermentation-derived thickener, generally recognized as safe.",
        "health_concerns": ["Digestive discomfort in large amounts"],
        "sources": ["FDA", "EFSA"],
    },
    {
        "name": "Carrageenan",
        "category": "thickener",
        "safety_rating": "caution",
        "confidence": 65,
        "explanation": "Seaweed-derived thickener; some studies associate it with gut inflammation.",
        "health_concerns": ["Gut inflammation"],
        "alternatives": ["Guar gum", "Agar"],
        "sources": ["EFSA", "Peer-reviewed studies"],
    },
]

# Alias → canonical name. Aliases share the canonical record.
INGREDIENT_ALIASES: dict[str, str] = {
    "vitamin c": "Ascorbic Acid",
    "l-ascorbic acid": "Ascorbic Acid",
    "red 40": "Artificial Color Red 40",
    "red dye 40": "Artificial Color Red 40",
    "fd&c red 40": "Artificial Color Red 40",
    "allura red": "Artificial Color Red 40",
    "yellow 5": "Artificial Color Yellow 5",
    "fd&c yellow 5": "Artificial Color Yellow 5",
    "tartrazine": "Artificial Color Yellow 5",
    "blue 1": "Artificial Color Blue 1",
    "fd&c blue 1": "Artificial Color Blue 1",
    "hfcs": "High Fructose Corn Syrup",
    "msg": "Monosodium Glutamate",
    "sodium bicarbonate": "Baking Soda",
    "vitamin e": "Tocopherols",
    "vitamin b3": "Niacin",
    "vitamin b1": "Thiamine Mononitrate",
    "vitamin b2": "Riboflavin",
    "sea salt": "Salt",
    "sodium chloride": "Salt",
    "cane sugar": "Organic Cane Sugar",
    "e211": "Sodium Benzoate",
    "e202": "Potassium Sorbate",
    "e330": "Citric Acid",
    "e300": "Ascorbic Acid",
    "e129": "Artificial Color Red 40",
    "e102": "Artificial Color Yellow 5",
    "e621": "Monosodium Glutamate",
    "e951": "Aspartame",
    "e955": "Sucralose",
    "e415": "Xanthan Gum",
    "e407": "Carrageenan",
    "e414": "Gum Arabic",
    "e250": "Sodium Nitrite",
}

# Words dropped from both sides before substring matching
QUALIFIER_WORDS = ("acid", "extract", "oil", "powder", "natural", "artificial")

# Base term → variants that should cross-match
SYNONYM_GROUPS: dict[str, list[str]] = {
    "sugar": ["cane sugar", "organic sugar", "raw sugar"],
    "vitamin c": ["ascorbic acid", "l-ascorbic acid"],
    "red 40": ["red dye 40", "fd&c red 40", "artificial color red 40"],
    "corn syrup": ["high fructose corn syrup", "hfcs"],
}

# Ordered naming heuristics for ingredients missing from the knowledge base:
# (keywords, category, rating, confidence). First hit wins.
FALLBACK_PATTERNS: list[tuple[tuple[str, ...], str, str, int]] = [
    (("acid",), "preservative", "caution", 60),
    (("vitamin", "mineral"), "vitamin", "safe", 80),
    (("color", "dye"), "coloring", "avoid", 70),
    (("flavor",), "flavoring", "caution", 65),
    (("sugar", "syrup"), "sweetener", "caution", 75),
    (("oil", "fat"), "fat", "caution", 60),
]
UNKNOWN_CATEGORY = "unknown"
UNKNOWN_CONFIDENCE = 40

FALLBACK_HEALTH_CONCERNS = ["Unknown health impacts - requires research"]
FALLBACK_SOURCES = ["Pattern analysis - requires verification"]
