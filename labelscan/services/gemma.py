"""
Gemini client for ingredient classification.

classify_ingredient_batch() sends one batch of label ingredient names and
returns the per-ingredient items of the model's reply, taken from its
"ingredients" key (a bare JSON list is accepted too).

Primary model  : GEMMA_MODEL          (default: gemini-2.5-flash)
Fallback model : GEMMA_FALLBACK_MODEL (default: gemma-3-12b-it)

A batch is tried on the primary, then once on the fallback. A reply without a
usable ingredient list counts as a failure. If both models fail the caller
gets GemmaError and classifies that batch with rules instead.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Sequence

import google.generativeai as genai

from labelscan.config import settings
from labelscan.utils.prompts import build_classification_prompt

logger = logging.getLogger(__name__)

genai.configure(api_key=settings.google_api_key)

_QUOTA_INDICATORS = ("resource_exhausted", "429", "quota", "rate limit")


class GemmaError(Exception):
    """Raised when both models fail on a batch or reply without an ingredient list."""


@dataclass(frozen=True)
class _Model:
    name: str
    client: genai.GenerativeModel
    config: genai.GenerationConfig
    timeout: int


def _build_model(name: str, timeout: int) -> _Model:
    # Gemma models reject JSON mode; their replies are fence-stripped instead
    if name.startswith("gemini"):
        config = genai.GenerationConfig(
            temperature=0.1, max_output_tokens=4096, response_mime_type="application/json"
        )
    else:
        config = genai.GenerationConfig(temperature=0.1, max_output_tokens=4096)
    return _Model(name, genai.GenerativeModel(name), config, timeout)


_PRIMARY = _build_model(settings.gemma_model, timeout=30)
_FALLBACK = _build_model(settings.gemma_fallback_model, timeout=60)   # larger, slower


def _is_quota_error(exc: Exception) -> bool:
    msg = str(exc).lower()
    return any(indicator in msg for indicator in _QUOTA_INDICATORS)


def _strip_fences(text: str) -> str:
    """Remove ```json ... ``` fences models like to wrap JSON in."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        cleaned = "\n".join(lines[1:-1] if lines[-1].startswith("```") else lines[1:])
    return cleaned.strip()


def parse_ingredient_items(text: str) -> list[Any]:
    """The reply's ingredient items; unvalidated, the classifier checks each one."""
    try:
        data = json.loads(_strip_fences(text))
    except json.JSONDecodeError as exc:
        raise GemmaError(f"Invalid JSON from model: {exc}") from exc
    items = data.get("ingredients") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise GemmaError("Model reply has no ingredient list")
    return items


async def _ask(model: _Model, prompt: str) -> list[Any]:
    """One model call in a worker thread; cancelled with the awaiting task."""
    response = await asyncio.wait_for(
        asyncio.to_thread(model.client.generate_content, prompt, generation_config=model.config),
        timeout=model.timeout,
    )
    return parse_ingredient_items(response.text)


def _describe(names: Sequence[str]) -> str:
    head = ", ".join(names[:3])
    return f"batch of {len(names)} ({head}{', ...' if len(names) > 3 else ''})"


async def classify_ingredient_batch(names: Sequence[str]) -> list[Any]:
    """Ask the primary model, then the fallback, to classify one batch of names."""
    prompt = build_classification_prompt(list(names))
    batch = _describe(names)

    # ── Attempt 1: primary model ─────────────────────────────────────────────
    try:
        return await _ask(_PRIMARY, prompt)
    except asyncio.CancelledError:
        raise
    except Exception as primary_exc:
        reason = "quota exhausted" if _is_quota_error(primary_exc) else f"failed ({primary_exc})"
        logger.warning(
            "Primary model '%s' %s on %s, switching to fallback '%s'",
            _PRIMARY.name, reason, batch, _FALLBACK.name,
        )

    # ── Attempt 2: fallback model ────────────────────────────────────────────
    try:
        items = await _ask(_FALLBACK, prompt)
    except asyncio.CancelledError:
        raise
    except Exception as fallback_exc:
        logger.error("Fallback model '%s' also failed on %s: %s", _FALLBACK.name, batch, fallback_exc)
        raise GemmaError(
            f"Both {_PRIMARY.name} and {_FALLBACK.name} failed on {batch}: {fallback_exc}"
        ) from fallback_exc
    logger.info("Fallback model '%s' classified %s.", _FALLBACK.name, batch)
    return items
