"""OCR service that turns uploaded label images into raw text."""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Protocol

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")

_logger = logging.getLogger(__name__)


class ImageDecodeError(ValueError):
    """Raised when an uploaded image payload is not valid base64."""


class TextNotFoundError(LookupError):
    """Raised when OCR finds no text in an image."""


class OcrError(RuntimeError):
    """Raised when the OCR backend reports a failure."""


class OcrClient(Protocol):
    """Interface for OCR text detection."""

    async def detect_text(self, image_bytes: bytes) -> str:
        """Return the full text detected in an image."""


@dataclass
class OcrService:
    """Decode uploaded images and run text detection."""

    client: OcrClient

    async def recognize(self, image_data: str) -> str:
        """Return OCR text for a base64 image or data URL."""
        image_bytes = decode_image_data(image_data)
        text = await self.client.detect_text(image_bytes)
        if not text.strip():
            raise TextNotFoundError("No text detected in image")
        _logger.info("OCR detected %s characters", len(text))
        return text


def decode_image_data(image_data: str) -> bytes:
    """Decode a base64 payload, with or without a data URL prefix."""
    payload = _DATA_URL_PREFIX.sub("", image_data.strip())
    if not payload:
        raise ImageDecodeError("No image data provided")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageDecodeError("Image data is not valid base64") from exc
