"""
KnowledgeBase — read-only ingredient safety table.

Keys are lower-cased canonical names plus registered aliases; every alias
points at the same IngredientEntry object. Built once at startup from the
seed list in utils.ingredient_data, optionally extended from a JSON file:

    {
      "ingredients": [{"name": "...", "category": "...", "safety_rating": "safe",
                       "confidence": 90, "explanation": "...", ...}],
      "aliases": {"alias": "Canonical Name"}
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

from labelscan.schemas.analysis import IngredientEntry
from labelscan.utils.ingredient_data import INGREDIENT_ALIASES, SEED_INGREDIENTS

logger = logging.getLogger(__name__)


class KnowledgeBaseError(Exception):
    """Raised when an extension file cannot be loaded."""


class KnowledgeBase:
    """Immutable name/alias → IngredientEntry mapping with O(1) exact lookup."""

    def __init__(
        self,
        entries: Iterable[IngredientEntry],
        aliases: Optional[Mapping[str, str]] = None,
    ) -> None:
        table: dict[str, IngredientEntry] = {}
        canonical: dict[str, IngredientEntry] = {}
        for entry in entries:
            key = entry.name.lower().strip()
            table[key] = entry
            canonical[key] = entry

        for alias, target in (aliases or {}).items():
            entry = canonical.get(target.lower().strip())
            if entry is None:
                logger.warning("Alias %r points at unknown ingredient %r, skipped.", alias, target)
                continue
            table.setdefault(alias.lower().strip(), entry)

        self._table = MappingProxyType(table)
        self._entries = tuple(canonical.values())

    # ── Construction ───────────────────────────────────────────────────────────

    @classmethod
    def from_seed(cls, extra_path: Optional[str] = None) -> "KnowledgeBase":
        """Build from the built-in seed, merging an optional JSON extension file."""
        records: dict[str, dict[str, Any]] = {
            r["name"].lower(): r for r in SEED_INGREDIENTS
        }
        aliases: dict[str, str] = dict(INGREDIENT_ALIASES)

        if extra_path:
            extra = cls._read_extension(Path(extra_path))
            for record in extra.get("ingredients", []):
                records[record["name"].lower()] = record
            aliases.update(extra.get("aliases", {}))

        try:
            entries = [IngredientEntry.model_validate(r) for r in records.values()]
        except ValueError as exc:
            raise KnowledgeBaseError(f"Invalid ingredient record: {exc}") from exc

        kb = cls(entries, aliases)
        logger.info(
            "Knowledge base loaded: %d ingredients, %d lookup keys.", len(kb._entries), len(kb)
        )
        return kb

    @staticmethod
    def _read_extension(path: Path) -> dict[str, Any]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise KnowledgeBaseError(f"Cannot read knowledge base file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise KnowledgeBaseError(f"{path} must contain a JSON object")
        return data

    # ── Lookup ─────────────────────────────────────────────────────────────────

    def get(self, name: str) -> Optional[IngredientEntry]:
        """Exact, case-insensitive lookup by canonical name or alias."""
        return self._table.get(name.lower().strip())

    def items(self) -> Iterator[tuple[str, IngredientEntry]]:
        """(key, entry) pairs in registration order: canonical names first, then aliases."""
        return iter(self._table.items())

    def keys(self) -> Iterator[str]:
        return iter(self._table.keys())

    @property
    def entries(self) -> tuple[IngredientEntry, ...]:
        return self._entries

    def suggest(self, query: str, limit: int = 10) -> list[str]:
        """Canonical names whose key or name contains `query` (autocomplete)."""
        needle = query.lower().strip()
        if not needle:
            return []
        suggestions: list[str] = []
        for key, entry in self._table.items():
            if needle in key or needle in entry.name.lower():
                if entry.name not in suggestions:
                    suggestions.append(entry.name)
                if len(suggestions) >= limit:
                    break
        return suggestions

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower().strip() in self._table

    def __len__(self) -> int:
        return len(self._table)
