"""
TextNormalizer — turns raw OCR output into a single delimiter-ready string.

Steps, in order:
  1. collapse whitespace (newlines included) to single spaces
  2. correct common OCR misreads of label words
  3. drop everything up to and including the ingredient-list label
  4. cut at the leftmost stop phrase (nutrition panel, allergens, address, ...)

Never raises; empty input gives an empty string.
"""

from __future__ import annotations

import re

from labelscan.utils.label_text import LABEL_PHRASES, OCR_CORRECTIONS, STOP_PHRASES

_WHITESPACE_RE = re.compile(r"\s+")


def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    """Match `phrase` on word boundaries; trailing punctuation needs no boundary."""
    head = r"(?<![\w])" if phrase[0].isalnum() else ""
    tail = r"(?![\w])" if phrase[-1].isalnum() else ""
    return re.compile(head + re.escape(phrase) + tail, re.IGNORECASE)


_LABEL_PATTERNS = [_phrase_pattern(p) for p in LABEL_PHRASES]
# OCR often drops the colon after a leading label: "INGREDIENTS Water, Sugar"
_BARE_LABEL_RE = re.compile(r"^\s*ingredients?\b[\s\-–—.]*", re.IGNORECASE)
_STOP_PATTERNS = [_phrase_pattern(p) for p in STOP_PHRASES]
_OCR_CORRECTION_RE = re.compile(
    r"\b(" + "|".join(re.escape(k) for k in OCR_CORRECTIONS) + r")\b", re.IGNORECASE
)


class TextNormalizer:
    """Cleans label text. Stateless; one instance can be shared."""

    def normalize(self, raw_text: str | None) -> str:
        if not raw_text:
            return ""
        text = _WHITESPACE_RE.sub(" ", raw_text).strip()
        text = self.correct_ocr_errors(text)
        text = self.strip_label(text)
        text = self.truncate_at_stop_phrase(text)
        return text.strip(" :;,.-")

    @staticmethod
    def correct_ocr_errors(text: str) -> str:
        return _OCR_CORRECTION_RE.sub(lambda m: OCR_CORRECTIONS[m.group(1).lower()], text)

    @staticmethod
    def strip_label(text: str) -> str:
        """Remove the first (highest-priority) ingredient label and anything before it."""
        for pattern in _LABEL_PATTERNS:
            match = pattern.search(text)
            if match:
                return text[match.end():].strip()
        bare = _BARE_LABEL_RE.match(text)
        if bare:
            return text[bare.end():].strip()
        return text

    @staticmethod
    def truncate_at_stop_phrase(text: str) -> str:
        """Cut the text at the leftmost stop phrase, if any."""
        cut = len(text)
        for pattern in _STOP_PATTERNS:
            match = pattern.search(text)
            if match and match.start() < cut:
                cut = match.start()
        return text[:cut]
