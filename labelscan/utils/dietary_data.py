"""
Default dietary programs — every new profile starts with this catalog, all inactive.
Matching is substring-based in both directions, so entries are lower-case fragments.
"""

from typing import Any

DEFAULT_PREFERENCES: list[dict[str, Any]] = [
    {
        "id": "gluten-free",
        "name": "gluten-free",
        "label": "Gluten-Free",
        "description": "Avoid wheat, barley, rye, and other gluten-containing ingredients",
        "category": "medical",
        "ingredients_to_avoid": [
            "wheat flour", "enriched flour", "barley", "rye", "malt", "wheat starch",
            "wheat protein", "vital wheat gluten", "modified wheat starch",
        ],
        "ingredients_to_flag": ["natural flavors", "modified food starch", "caramel color"],
    },
    {
        "id": "vegan",
        "name": "vegan",
        "label": "Vegan",
        "description": "Avoid all animal-derived ingredients",
        "category": "lifestyle",
        "ingredients_to_avoid": [
            "milk", "butter", "cheese", "whey", "casein", "lactose", "eggs",
            "honey", "gelatin", "carmine", "shellac", "lanolin",
        ],
        "ingredients_to_flag": ["natural flavors", "vitamin d3", "lactic acid"],
    },
    {
        "id": "vegetarian",
        "name": "vegetarian",
        "label": "Vegetarian",
        "description": "Avoid meat and fish-derived ingredients",
        "category": "lifestyle",
        "ingredients_to_avoid": [
            "gelatin", "carmine", "isinglass", "anchovies", "fish sauce",
            "chicken fat", "beef tallow", "lard",
        ],
        "ingredients_to_flag": ["natural flavors", "enzymes", "vitamin d3"],
    },
    {
        "id": "diabetic",
        "name": "diabetic",
        "label": "Diabetic-Friendly",
        "description": "Avoid high-sugar ingredients and monitor carbohydrates",
        "category": "medical",
        "ingredients_to_avoid": [
            "high fructose corn syrup", "corn syrup", "dextrose", "maltose",
            "sucrose", "fructose", "glucose syrup",
        ],
        "ingredients_to_flag": ["sugar", "organic cane sugar", "brown sugar", "honey", "agave"],
    },
    {
        "id": "keto",
        "name": "keto",
        "label": "Keto",
        "description": "Avoid high-carb ingredients for ketogenic diet",
        "category": "lifestyle",
        "ingredients_to_avoid": [
            "sugar", "high fructose corn syrup", "wheat flour", "rice", "potato starch",
            "corn starch", "maltodextrin", "dextrose",
        ],
        "ingredients_to_flag": ["natural flavors", "modified food starch", "tapioca starch"],
    },
    {
        "id": "paleo",
        "name": "paleo",
        "label": "Paleo",
        "description": "Avoid processed foods and focus on whole ingredients",
        "category": "lifestyle",
        "ingredients_to_avoid": [
            "wheat flour", "corn syrup", "soy lecithin", "carrageenan",
            "xanthan gum", "artificial colors", "artificial flavors",
        ],
        "ingredients_to_flag": ["natural flavors", "guar gum", "locust bean gum"],
    },
    {
        "id": "low-sodium",
        "name": "low-sodium",
        "label": "Low Sodium",
        "description": "Monitor and limit sodium intake",
        "category": "medical",
        "ingredients_to_avoid": [
            "sodium chloride", "monosodium glutamate", "sodium nitrate",
            "sodium nitrite", "sodium phosphate",
        ],
        "ingredients_to_flag": ["salt", "sodium benzoate", "sodium citrate", "baking soda"],
    },
    {
        "id": "dairy-free",
        "name": "dairy-free",
        "label": "Dairy-Free",
        "description": "Avoid all dairy and lactose-containing ingredients",
        "category": "allergy",
        "ingredients_to_avoid": [
            "milk", "butter", "cheese", "cream", "whey", "casein",
            "lactose", "milk powder", "buttermilk",
        ],
        "ingredients_to_flag": ["natural flavors", "caramel color", "lactic acid"],
    },
    {
        "id": "nut-free",
        "name": "nut-free",
        "label": "Nut-Free",
        "description": "Avoid tree nuts and peanuts",
        "category": "allergy",
        "ingredients_to_avoid": [
            "peanuts", "tree nuts", "almonds", "walnuts", "pecans",
            "cashews", "pistachios", "hazelnuts", "peanut oil",
        ],
        "ingredients_to_flag": ["natural flavors", "natural oils"],
    },
    {
        "id": "soy-free",
        "name": "soy-free",
        "label": "Soy-Free",
        "description": "Avoid soy-derived ingredients",
        "category": "allergy",
        "ingredients_to_avoid": [
            "soy", "soy lecithin", "soybean oil", "soy protein",
            "soy flour", "tofu", "tempeh", "miso",
        ],
        "ingredients_to_flag": ["natural flavors", "vegetable oil", "vitamin e"],
    },
]

CUSTOM_REASON_TEMPLATE = "Custom restriction: {reason}"
FLAG_REASON_TEMPLATE = "{label}: May contain restricted ingredients"
AVOID_REASON_TEMPLATE = "{label}: {description}"

# Recurring problem ingredients in scan history → suggested program
PREFERENCE_HINTS: list[tuple[tuple[str, ...], str, str]] = [
    (
        ("gluten", "wheat flour", "enriched flour"),
        "gluten-free",
        "Frequently scanned products contain gluten-based ingredients",
    ),
    (
        ("high fructose corn syrup", "sugar", "corn syrup"),
        "diabetic",
        "Many scanned products contain high-sugar ingredients",
    ),
    (
        ("artificial color red 40", "artificial flavors"),
        "paleo",
        "Scanned products often contain artificial additives",
    ),
]
