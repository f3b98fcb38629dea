"""
FuzzyMatcher — resolves free-text label names to KnowledgeBase entries.

Resolution order, first hit wins:
  1. exact key (canonical name or alias)
  2. qualifier words stripped from both sides, substring containment
     in either direction, keys scanned in registration order
  3. known synonym groups ("sugar" ~ "cane sugar", "red 40" ~ "fd&c red 40", ...)

Containment is loose on purpose and can over-match short keys. Callers only
depend on match(); a stricter strategy can replace this class as-is.
"""

from __future__ import annotations

import re
from typing import Optional

from labelscan.schemas.analysis import IngredientEntry
from labelscan.services.knowledge_base import KnowledgeBase
from labelscan.utils.ingredient_data import QUALIFIER_WORDS, SYNONYM_GROUPS

_QUALIFIER_RE = re.compile(r"\b(?:" + "|".join(QUALIFIER_WORDS) + r")\b")
_SPACES_RE = re.compile(r"\s+")


def strip_qualifiers(name: str) -> str:
    """Lower-case `name` and drop qualifier words ("citric acid" → "citric")."""
    return _SPACES_RE.sub(" ", _QUALIFIER_RE.sub(" ", name.lower())).strip()


class FuzzyMatcher:
    def __init__(self, knowledge_base: KnowledgeBase) -> None:
        self._kb = knowledge_base
        # Stripped keys are fixed for the KB's lifetime; compute once
        self._stripped = [
            (strip_qualifiers(key), key, entry) for key, entry in knowledge_base.items()
        ]

    def match(self, name: str) -> Optional[IngredientEntry]:
        """Return the resolved entry, or None when the name is unresolved."""
        query = name.lower().strip()
        if not query:
            return None

        exact = self._kb.get(query)
        if exact is not None:
            return exact

        stripped_query = strip_qualifiers(query)
        if stripped_query:
            for stripped_key, _, entry in self._stripped:
                if not stripped_key:
                    continue
                if stripped_key in stripped_query or stripped_query in stripped_key:
                    return entry

        for _, key, entry in self._stripped:
            if self.is_synonym(query, key):
                return entry
        return None

    @staticmethod
    def is_synonym(query: str, key: str) -> bool:
        """True if one side names a group's base term and the other one of its variants."""
        for base, variants in SYNONYM_GROUPS.items():
            if base in query and any(v in key for v in variants):
                return True
            if base in key and any(v in query for v in variants):
                return True
        return False
