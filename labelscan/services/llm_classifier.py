"""
LLMSafetyClassifier — optional model-backed classifier (USE_LLM_CLASSIFIER).

Candidates are deduplicated, sent in batches of LLM_BATCH_SIZE concurrently
through classify_ingredient_batch, and reassembled in label order. Replies are validated
and confidence is clamped to 0-100.

Per-name results are cached (cachetools TTLCache, LLM_CACHE_TTL_SECONDS) under
a hash of the normalized name, so a label re-scanned within the TTL costs no
model calls. Any name the model skips or garbles, and every name of a failed
batch, is classified by the rule-based SafetyClassifier instead.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from typing import Any, Optional, Sequence

from cachetools import TTLCache
from pydantic import ValidationError

from labelscan.schemas.analysis import IngredientAnalysis, SafetyRating
from labelscan.services.gemma import GemmaError, classify_ingredient_batch
from labelscan.services.safety_classifier import SafetyClassifier, clamp_confidence

logger = logging.getLogger(__name__)

LLM_SOURCE = "AI analysis (Gemini)"


def _name_key(name: str) -> str:
    return hashlib.sha256(name.lower().strip().encode()).hexdigest()[:24]


class LLMSafetyClassifier:
    def __init__(
        self,
        fallback: SafetyClassifier,
        batch_size: int = 20,
        cache_ttl_seconds: int = 3600,
        cache_maxsize: int = 5_000,
    ) -> None:
        self._fallback = fallback
        self._batch_size = max(1, batch_size)
        # name key → IngredientAnalysis fields minus name/position
        self._cache: TTLCache = TTLCache(maxsize=cache_maxsize, ttl=cache_ttl_seconds)

    async def classify_many(self, names: Sequence[str]) -> list[IngredientAnalysis]:
        resolved: dict[str, dict[str, Any]] = {}
        pending: list[str] = []
        pending_keys: set[str] = set()
        for name in names:
            key = _name_key(name)
            if key in resolved or key in pending_keys:
                continue
            cached = self._cache.get(key)
            if cached is not None:
                resolved[key] = cached
            else:
                pending.append(name)
                pending_keys.add(key)

        if pending:
            batches = [
                pending[i:i + self._batch_size]
                for i in range(0, len(pending), self._batch_size)
            ]
            replies = await asyncio.gather(*(self._classify_batch(b) for b in batches))
            for reply in replies:
                for key, fields in reply.items():
                    self._cache[key] = fields
                    resolved[key] = fields
            logger.info(
                "LLM classified %d/%d new ingredients in %d batch(es).",
                sum(len(r) for r in replies), len(pending), len(batches),
            )

        results: list[IngredientAnalysis] = []
        for position, name in enumerate(names, start=1):
            fields = resolved.get(_name_key(name))
            if fields is None:
                results.append(self._fallback.classify(name, position))
            else:
                results.append(IngredientAnalysis(name=name, position=position, **fields))
        return results

    async def _classify_batch(self, batch: list[str]) -> dict[str, dict[str, Any]]:
        """Name key → analysis fields for every usable item in the model's reply."""
        try:
            items = await classify_ingredient_batch(batch)
        except GemmaError as exc:
            logger.warning("Using rule-based fallback: %s", exc)
            return {}

        wanted = {_name_key(n) for n in batch}
        parsed: dict[str, dict[str, Any]] = {}
        for item in items:
            fields = self._parse_item(item)
            if fields is None:
                continue
            key = _name_key(item["ingredient"])
            if key in wanted:
                parsed[key] = fields
        return parsed

    @staticmethod
    def _parse_item(item: Any) -> Optional[dict[str, Any]]:
        if not isinstance(item, dict) or not isinstance(item.get("ingredient"), str):
            return None
        try:
            rating = SafetyRating(str(item.get("safety_rating", "")).lower())
            confidence = clamp_confidence(float(item.get("confidence", 0)))
            # Validate the whole shape once; name/position are placeholders
            analysis = IngredientAnalysis(
                name=item["ingredient"],
                position=1,
                rating=rating,
                confidence=confidence,
                explanation=str(item.get("explanation") or "No explanation provided."),
                category=str(item.get("category") or "unknown").lower(),
                health_concerns=[str(c) for c in item.get("health_concerns") or []],
                alternatives=[str(a) for a in item.get("alternatives") or []],
                sources=[str(s) for s in item.get("sources") or []] or [LLM_SOURCE],
            )
        except (ValueError, TypeError, ValidationError):
            return None
        return analysis.model_dump(exclude={"name", "position"})
