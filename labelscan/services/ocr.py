"""
OCR providers — turn a label photo into text plus a 0-100 confidence.

  GoogleVisionOCRProvider : Cloud Vision images:annotate (TEXT_DETECTION) over requests
  TesseractOCRProvider    : local Tesseract via pytesseract + Pillow

Both run their blocking work in a worker thread so the awaiting scan can be
cancelled. Any failure, including an image with no readable text, raises
ExtractionFailure; providers never make text up.
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
from typing import Any, Protocol

import pytesseract
import requests
from PIL import Image, UnidentifiedImageError

from labelscan.config import Settings
from labelscan.schemas.scan import OCRResult

logger = logging.getLogger(__name__)

# Vision only sometimes returns a score for the full-text annotation
VISION_DEFAULT_CONFIDENCE = 85


class ExtractionFailure(Exception):
    """OCR provider error, or an image without readable text."""


class OCRProvider(Protocol):
    async def extract_text(self, image: bytes) -> OCRResult:
        ...


# ── Google Cloud Vision ──────────────────────────────────────────────────────


class GoogleVisionOCRProvider:
    source = "google-vision"

    def __init__(
        self,
        api_key: str,
        url: str = "https://vision.googleapis.com/v1/images:annotate",
        timeout_seconds: int = 30,
        language_hints: tuple[str, ...] = ("en",),
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._timeout = timeout_seconds
        self._language_hints = list(language_hints)
        self._session = requests.Session()

    def _request_body(self, image: bytes) -> dict[str, Any]:
        return {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image).decode("ascii")},
                    "features": [{"type": "TEXT_DETECTION", "maxResults": 1}],
                    "imageContext": {"languageHints": self._language_hints},
                }
            ]
        }

    def _post(self, image: bytes) -> dict[str, Any]:
        response = self._session.post(
            self._url,
            params={"key": self._api_key},
            json=self._request_body(image),
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()

    async def extract_text(self, image: bytes) -> OCRResult:
        if not self._api_key:
            raise ExtractionFailure("Google Vision API key not configured")
        try:
            data = await asyncio.to_thread(self._post, image)
        except requests.RequestException as exc:
            logger.warning("Google Vision request failed: %s", exc)
            raise ExtractionFailure(f"Google Vision API request failed: {exc}") from exc
        except ValueError as exc:
            raise ExtractionFailure("Google Vision returned a non-JSON response") from exc

        return self.parse_response(data)

    def parse_response(self, data: dict[str, Any]) -> OCRResult:
        response = (data.get("responses") or [{}])[0]
        if "error" in response:
            message = response["error"].get("message", "unknown error")
            raise ExtractionFailure(f"Google Vision error: {message}")

        annotations = response.get("textAnnotations") or []
        text = (annotations[0].get("description") or "") if annotations else ""
        if not text.strip():
            raise ExtractionFailure("No text detected in image")

        score = annotations[0].get("score")
        confidence = round(score * 100) if score else VISION_DEFAULT_CONFIDENCE
        return OCRResult(text=text, confidence=max(0, min(100, confidence)), source=self.source)


# ── Tesseract ────────────────────────────────────────────────────────────────


class TesseractOCRProvider:
    source = "tesseract"

    def __init__(self, lang: str = "eng", timeout_seconds: int = 30) -> None:
        self._lang = lang
        self._timeout = timeout_seconds

    def _run(self, image: bytes) -> OCRResult:
        with Image.open(io.BytesIO(image)) as img:
            img = img.convert("L")
            text = pytesseract.image_to_string(img, lang=self._lang, timeout=self._timeout)
            data = pytesseract.image_to_data(
                img, lang=self._lang, timeout=self._timeout, output_type=pytesseract.Output.DICT
            )
        # Word-level confidences; -1 marks layout rows with no word
        scores = [float(c) for c in data.get("conf", []) if float(c) >= 0]
        confidence = round(sum(scores) / len(scores)) if scores else 0
        return OCRResult(text=text, confidence=max(0, min(100, confidence)), source=self.source)

    async def extract_text(self, image: bytes) -> OCRResult:
        try:
            result = await asyncio.to_thread(self._run, image)
        except UnidentifiedImageError as exc:
            raise ExtractionFailure("Uploaded file is not a readable image") from exc
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, RuntimeError) as exc:
            logger.warning("Tesseract OCR failed: %s", exc)
            raise ExtractionFailure(f"Tesseract OCR failed: {exc}") from exc

        if not result.text.strip():
            raise ExtractionFailure("No text detected in image")
        return result


def build_ocr_provider(settings: Settings) -> OCRProvider:
    if settings.ocr_backend == "tesseract":
        return TesseractOCRProvider(
            lang=settings.tesseract_lang, timeout_seconds=settings.ocr_timeout_seconds
        )
    return GoogleVisionOCRProvider(
        api_key=settings.google_vision_api_key,
        url=settings.google_vision_url,
        timeout_seconds=settings.ocr_timeout_seconds,
    )
