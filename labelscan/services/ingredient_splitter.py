"""
IngredientSplitter — splits normalized label text into candidate ingredients.

Splits only at top level (outside parentheses/brackets) on ',', ';' and on a
period followed by a letter, so "Enriched Flour (Wheat Flour, Niacin)" stays
one candidate and "2.5%" is never split. Web addresses and e-mails are removed
whole before splitting. Each fragment is cleaned, length-checked without its
bracketed content, filtered against address / nutrition-panel noise and
de-duplicated case-insensitively.
"""

from __future__ import annotations

import re

from labelscan.utils.label_text import (
    ADDRESS_WORDS,
    ENTITY_SUFFIXES,
    GEOGRAPHIC_NAMES,
    NUTRITION_TERMS,
    STOPWORDS,
    UNITS,
    US_STATE_CODES,
)

MIN_LENGTH = 2
MAX_LENGTH = 60

_OPENERS = "([{"
_CLOSERS = ")]}"

_UNIT_ALT = "|".join(UNITS)
_PARENTHETICAL_RE = re.compile(r"\([^()]*\)|\[[^\[\]]*\]|\{[^{}]*\}")
_UNCLOSED_RE = re.compile(r"[(\[{][^)\]}]*$")
_PERCENT_PHRASE_RE = re.compile(
    r"(?:contains\s+)?(?:less\s+than\s+)?\d+(?:[.,]\d+)?\s*%\s*(?:or\s+less\s*)?(?:of\s*)?:?",
    re.IGNORECASE,
)
_QUANTITY_RE = re.compile(rf"\b\d+(?:[.,]\d+)?\s*(?:{_UNIT_ALT})\b", re.IGNORECASE)
_BARE_UNIT_RE = re.compile(rf"^(?:{_UNIT_ALT}|%)$", re.IGNORECASE)
_BULLET_RE = re.compile(r"[•·●▪■◦*]")
_LEADING_CONJUNCTION_RE = re.compile(r"^(?:and/or|and|or|&)\s+", re.IGNORECASE)
_EDGE_PUNCT_RE = re.compile(r"^[^\w(]+|[^\w)]+$")
_CAMEL_RE = re.compile(r"([a-z])([A-Z])")
_SPACES_RE = re.compile(r"\s+")

_STATE_ZIP_RE = re.compile(r"^([A-Za-z]{2})\.?(?:\s+\d{5}(?:-\d{4})?)?$")
_NUMERIC_RE = re.compile(r"^[\d\s.,%/-]+$")
_HAS_LETTER_RE = re.compile(r"[^\W\d_]")
_ZIP_RE = re.compile(r"\b\d{5}(?:-\d{4})?\b")
_PHONE_RE = re.compile(r"(?:\+?1[\s.-]?)?\(?\b\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}\b")
_URL_EMAIL_RE = re.compile(r"https?://|www\.|\.(?:com|net|org|co\.uk)\b|\S+@\S+", re.IGNORECASE)
# Whole web tokens, removed before splitting so "acme.com" leaves no "com" behind
_WEB_TOKEN_RE = re.compile(
    r"[^\s,;()\[\]{}]*(?:@|https?://|www\.)[^\s,;()\[\]{}]*"
    r"|[^\s,;()\[\]{}]+\.(?:com|net|org|co\.uk)\b[^\s,;()\[\]{}]*",
    re.IGNORECASE,
)
_NUTRITION_RE = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(t) for t in NUTRITION_TERMS) + r")(?!\w)",
    re.IGNORECASE,
)
_TOKEN_RE = re.compile(r"[a-z]+(?:\.[a-z]+)*\.?", re.IGNORECASE)


class IngredientSplitter:
    """Produces the ordered, de-duplicated candidate list for a label."""

    def split(self, text: str) -> list[str]:
        seen: set[str] = set()
        candidates: list[str] = []
        text = _WEB_TOKEN_RE.sub(",", text or "")
        fragments = [f.strip() for f in self.split_top_level(text)]
        for index, fragment in enumerate(fragments):
            if self._is_city_before_state(fragments, index):
                continue
            cleaned = self.clean(fragment)
            # Bracketed sub-ingredients do not count towards the length limit
            if not MIN_LENGTH <= len(cleaned) <= MAX_LENGTH or self.is_noise(cleaned):
                continue
            key = cleaned.lower()
            if key in seen:
                continue
            seen.add(key)
            candidates.append(cleaned)
        return candidates

    @staticmethod
    def _is_city_before_state(fragments: list[str], index: int) -> bool:
        """True for the city in "Springfield, IL 62701"."""
        if index + 1 >= len(fragments):
            return False
        match = _STATE_ZIP_RE.match(fragments[index + 1])
        return bool(match) and match.group(1).upper() in US_STATE_CODES

    @staticmethod
    def split_top_level(text: str) -> list[str]:
        """Split on delimiters that are not nested inside brackets."""
        parts: list[str] = []
        depth = 0
        start = 0
        length = len(text)
        for i, ch in enumerate(text):
            if ch in _OPENERS:
                depth += 1
            elif ch in _CLOSERS:
                depth = max(0, depth - 1)
            elif depth == 0 and ch in ",;":
                parts.append(text[start:i])
                start = i + 1
            elif depth == 0 and ch == ".":
                j = i + 1
                while j < length and text[j] == " ":
                    j += 1
                if j < length and text[j].isalpha():
                    parts.append(text[start:i])
                    start = i + 1
        parts.append(text[start:])
        return parts

    @staticmethod
    def clean(fragment: str) -> str:
        """Strip quantities, parentheticals, bullets and stray punctuation."""
        text = _BULLET_RE.sub(" ", fragment)
        # Inner groups first so nested brackets collapse completely
        previous = None
        while previous != text:
            previous = text
            text = _PARENTHETICAL_RE.sub(" ", text)
        text = _UNCLOSED_RE.sub(" ", text)
        text = _PERCENT_PHRASE_RE.sub(" ", text)
        text = _QUANTITY_RE.sub(" ", text)
        text = _CAMEL_RE.sub(r"\1 \2", text)
        text = _SPACES_RE.sub(" ", text).strip()
        text = _EDGE_PUNCT_RE.sub("", text)
        text = _LEADING_CONJUNCTION_RE.sub("", text)
        return text.strip()

    @staticmethod
    def is_noise(candidate: str) -> bool:
        """True for fragments that are clearly not ingredients."""
        lowered = candidate.lower()
        if _NUMERIC_RE.match(candidate) or not _HAS_LETTER_RE.search(candidate):
            return True
        if lowered in STOPWORDS or _BARE_UNIT_RE.match(candidate):
            return True
        if len(candidate) == 2 and candidate.upper() in US_STATE_CODES:
            return True
        if _ZIP_RE.search(candidate) or _PHONE_RE.search(candidate):
            return True
        if _URL_EMAIL_RE.search(candidate):
            return True
        if _NUTRITION_RE.search(candidate):
            return True
        if lowered in GEOGRAPHIC_NAMES:
            return True
        tokens = [t.rstrip(".").replace(".", "") for t in _TOKEN_RE.findall(lowered)]
        if any(t in ENTITY_SUFFIXES or t in ADDRESS_WORDS for t in tokens):
            return True
        return False
