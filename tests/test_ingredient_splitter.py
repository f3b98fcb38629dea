import pytest

from labelscan.services.ingredient_splitter import IngredientSplitter

splitter = IngredientSplitter()


def test_simple_list():
    assert splitter.split("Water, Sugar, Salt") == ["Water", "Sugar", "Salt"]


def test_empty_text_gives_no_candidates():
    assert splitter.split("") == []


def test_sub_ingredients_stay_with_their_parent():
    text = "Enriched Flour (Wheat Flour, Niacin, Reduced Iron), Sugar, 2% or less of: Salt"
    assert splitter.split(text) == ["Enriched Flour", "Sugar", "Salt"]


def test_long_sub_ingredient_lists_do_not_drop_their_parent():
    text = (
        "Enriched Flour (Wheat Flour, Niacin, Reduced Iron, Thiamine Mononitrate, "
        "Riboflavin, Folic Acid), Sugar, Milk Chocolate (Sugar, Cocoa Butter, Chocolate, "
        "Skim Milk, Milkfat, Soy Lecithin, Vanillin), Salt"
    )
    assert splitter.split(text) == ["Enriched Flour", "Sugar", "Milk Chocolate", "Salt"]


def test_decimals_are_not_split():
    assert splitter.split("Vitamin B2 0.5mg, Salt") == ["Vitamin B2", "Salt"]


def test_semicolons_and_sentence_periods_split():
    assert splitter.split("Water; Sugar. Salt") == ["Water", "Sugar", "Salt"]


def test_duplicates_removed_case_insensitively_keeping_first():
    assert splitter.split("Salt, Water, salt, SALT") == ["Salt", "Water"]


def test_address_and_company_lines_are_dropped():
    text = "Acme Foods Inc, 123 Main Street, Springfield, IL 62701, 1-800-555-0199"
    assert splitter.split(text) == []


def test_nutrition_jargon_is_dropped():
    assert splitter.split("Total Fat 2g, Cholesterol 0mg, Water") == ["Water"]


def test_stand_alone_stopwords_are_dropped():
    assert splitter.split("and, the, Sugar, or") == ["Sugar"]


def test_length_limits():
    too_long = "x" * 61
    assert splitter.split(f"A, {too_long}, Oats") == ["Oats"]


def test_camel_case_words_glued_by_ocr_are_separated():
    assert splitter.split("SoyLecithin, Salt") == ["Soy Lecithin", "Salt"]


@pytest.mark.parametrize(
    "text",
    [
        "Water, Sugar, info@acmefoods.com",
        "Water, acmefoods.com, Sugar",
        "Water,www.acme.org/contact, Sugar",
        "Water, https://acme.net/faq. Sugar",
    ],
)
def test_web_addresses_leave_no_fragments(text):
    assert splitter.split(text) == ["Water", "Sugar"]


@pytest.mark.parametrize(
    "candidate",
    ["12345", "CA", "90210", "(555) 123-4567", "info@acme.com", "mg", "Canada"],
)
def test_is_noise(candidate):
    assert splitter.is_noise(candidate)


@pytest.mark.parametrize("candidate", ["Water", "Citric Acid", "Red 40", "Vitamin B12"])
def test_real_ingredients_are_not_noise(candidate):
    assert not splitter.is_noise(candidate)
