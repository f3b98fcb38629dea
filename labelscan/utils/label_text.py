"""
Label vocabulary used by the text normalizer and ingredient splitter.
Everything here is lower-case; matching is case-insensitive.
"""

# Ingredient-list labels in priority order. The first one found wins.
LABEL_PHRASES: list[str] = [
    "ingredients:",
    "ingredient:",
    "ingrédients:",
    "ingredientes:",
    "ingredienti:",
    "zutaten:",
    "ingrediënten:",
    "composition:",
    "contiene:",
    "contains:",
    "made with:",
]

# Section headers that end the ingredient list. Cut at the leftmost hit.
STOP_PHRASES: list[str] = [
    # nutrition panel
    "nutrition facts", "nutrition information", "nutritional information",
    "supplement facts", "serving size", "servings per container", "amount per serving",
    "calories", "% daily value",
    # allergen boilerplate
    "allergens", "allergen information", "allergy advice", "may contain",
    "contains:", "produced in a facility", "manufactured in a facility",
    "processed in a facility",
    # usage and storage
    "directions", "instructions", "preparation", "storage", "store in",
    "keep refrigerated", "refrigerate after opening",
    # packaging and company
    "distributed by", "manufactured by", "manufactured for", "packed by",
    "packaged by", "produced by", "imported by", "made in", "product of",
    "customer service", "questions or comments", "call toll free", "visit us",
    "www.", "http",
    # dates and weights
    "best by", "best before", "use by", "sell by", "exp", "net wt", "net weight",
    "net contents",
    # address and city tokens
    "p.o. box", "po box", "usa", "u.s.a", "new york", "los angeles", "chicago",
    "san francisco", "battle creek", "minneapolis", "toronto",
    # restaurant chains (menu boards and takeaway packaging)
    "mcdonald's", "burger king", "wendy's", "taco bell", "kfc", "chick-fil-a",
    "starbucks", "dunkin", "chipotle", "pizza hut", "domino's", "subway",
]

# Frequent OCR misreads of label words. Digits are deliberately absent: they
# would corrupt names like "Red 40".
OCR_CORRECTIONS: dict[str, str] = {
    "sodiurn": "Sodium",
    "citrlc": "Citric",
    "artlflclal": "Artificial",
    "naturel": "Natural",
    "vltemin": "Vitamin",
    "vltamin": "Vitamin",
    "preservetive": "Preservative",
    "flevorlng": "Flavoring",
    "sweeteher": "Sweetener",
    "stebillzer": "Stabilizer",
    "emulslller": "Emulsifier",
    "thlckener": "Thickener",
    "lngredients": "Ingredients",
}

UNITS = ("mg", "mcg", "g", "kg", "ml", "l", "oz", "lb", "lbs")

STOPWORDS = frozenset({
    "and", "or", "the", "a", "an", "in", "on", "at", "by", "for", "with",
    "from", "of", "to", "as", "less", "than", "contains", "and/or", "per",
})

US_STATE_CODES = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID",
    "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS",
    "MO", "MT", "NE", "NV", "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK",
    "OR", "PA", "RI", "SC", "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV",
    "WI", "WY", "DC",
})

# Nutrition-panel jargon; a candidate containing any of these is dropped
NUTRITION_TERMS: tuple[str, ...] = (
    "serving size", "servings", "daily value", "calories", "total fat",
    "saturated fat", "trans fat", "cholesterol", "total carbohydrate",
    "dietary fiber", "total sugars", "added sugars", "includes", "percent daily",
    "nutrition", "kcal", "kj",
)

# Tokens that only appear in company names and postal addresses
ENTITY_SUFFIXES = frozenset({
    "inc", "llc", "ltd", "corp", "corporation", "co", "company", "gmbh",
    "plc", "incorporated", "limited",
})
ADDRESS_WORDS = frozenset({
    "street", "st", "avenue", "ave", "road", "rd", "blvd", "boulevard",
    "suite", "ste", "drive", "dr", "lane", "ln", "hwy", "highway", "phone",
    "tel", "fax", "zip", "box",
})

GEOGRAPHIC_NAMES = frozenset({
    "usa", "u.s.a", "united states", "america", "canada", "mexico",
    "united kingdom", "uk", "china", "india", "italy", "france", "germany",
    "california", "texas", "florida", "new york", "illinois", "michigan",
    "minnesota", "ohio", "georgia", "washington", "oregon", "new jersey",
    "pennsylvania", "chicago", "los angeles", "san francisco", "toronto",
    "battle creek", "minneapolis", "seattle", "boston", "atlanta", "dallas",
    "houston", "denver",
})
