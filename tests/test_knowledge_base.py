import json

import pytest

from labelscan.schemas.analysis import IngredientEntry, SafetyRating
from labelscan.services.fuzzy_matcher import FuzzyMatcher, strip_qualifiers
from labelscan.services.knowledge_base import KnowledgeBase, KnowledgeBaseError


# ── KnowledgeBase ────────────────────────────────────────────────────────────


def test_lookup_is_case_insensitive(knowledge_base):
    entry = knowledge_base.get("SODIUM BENZOATE")
    assert entry is not None
    assert entry.safety_rating == SafetyRating.AVOID
    assert entry.confidence == 80


def test_aliases_point_at_the_same_entry(knowledge_base):
    assert knowledge_base.get("vitamin c") is knowledge_base.get("ascorbic acid")
    assert knowledge_base.get("red 40") is knowledge_base.get("artificial color red 40")
    assert "hfcs" in knowledge_base


def test_entries_are_immutable(knowledge_base):
    entry = knowledge_base.get("water")
    with pytest.raises(ValueError):
        entry.confidence = 1


def test_alias_to_unknown_target_is_skipped():
    entry = IngredientEntry(
        name="Oats", category="grain", safety_rating="safe", confidence=95, explanation="Whole grain."
    )
    kb = KnowledgeBase([entry], {"rolled oats": "Oats", "ghost": "Nothing"})
    assert kb.get("rolled oats") is entry
    assert kb.get("ghost") is None
    assert len(kb) == 2


def test_extension_file_adds_and_replaces_entries(tmp_path):
    path = tmp_path / "extra.json"
    path.write_text(json.dumps({
        "ingredients": [
            {"name": "Quinoa", "category": "grain", "safety_rating": "safe",
             "confidence": 95, "explanation": "Whole grain seed."},
            {"name": "Salt", "category": "mineral", "safety_rating": "caution",
             "confidence": 60, "explanation": "Watch sodium."},
        ],
        "aliases": {"quinua": "Quinoa"},
    }))
    kb = KnowledgeBase.from_seed(str(path))
    assert kb.get("quinua").name == "Quinoa"
    assert kb.get("salt").safety_rating == SafetyRating.CAUTION
    assert kb.get("sea salt").confidence == 60


def test_unreadable_extension_file_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(KnowledgeBaseError):
        KnowledgeBase.from_seed(str(path))


def test_suggest(knowledge_base):
    suggestions = knowledge_base.suggest("sodium")
    assert "Sodium Benzoate" in suggestions
    assert "Sodium Nitrite" in suggestions
    assert len(suggestions) == len(set(suggestions))
    assert knowledge_base.suggest("sodium", limit=1) == suggestions[:1]
    assert knowledge_base.suggest("   ") == []


# ── FuzzyMatcher ─────────────────────────────────────────────────────────────


def test_strip_qualifiers():
    assert strip_qualifiers("Citric Acid Powder") == "citric"
    assert strip_qualifiers("Natural Vanilla Extract") == "vanilla"
    assert strip_qualifiers("natural oil") == ""


def test_exact_and_alias_match(matcher):
    assert matcher.match("Water").name == "Water"
    assert matcher.match("FD&C Red 40").name == "Artificial Color Red 40"
    assert matcher.match("  vitamin c ").name == "Ascorbic Acid"


def test_qualifier_stripped_containment(matcher):
    assert matcher.match("Citric Acid Powder").name == "Citric Acid"
    assert matcher.match("Organic Sugar").name == "Sugar"


def test_synonym_groups():
    assert FuzzyMatcher.is_synonym("corn syrup", "high fructose corn syrup")
    assert FuzzyMatcher.is_synonym("ascorbic acid", "vitamin c")
    assert not FuzzyMatcher.is_synonym("water", "salt")


def test_unresolved_names(matcher):
    assert matcher.match("Whey") is None
    assert matcher.match("Quinoa") is None
    assert matcher.match("") is None
    assert matcher.match("Natural Oil") is None
