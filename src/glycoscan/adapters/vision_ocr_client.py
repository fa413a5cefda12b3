"""Google Cloud Vision REST client for text detection."""

import base64
from dataclasses import dataclass

import httpx

from glycoscan.services.ocr import OcrClient, OcrError


@dataclass
class HttpxVisionOcrClient(OcrClient):
    """HTTPX-backed Cloud Vision client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxVisionOcrClient":
        """Create a Vision client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def detect_text(self, image_bytes: bytes) -> str:
        """Run TEXT_DETECTION and return the full detected text."""
        url = f"{self.base_url}/images:annotate"
        response = await self.http_client.post(
            url,
            params={"key": self.api_key},
            json={
                "requests": [
                    {
                        "image": {
                            "content": base64.b64encode(image_bytes).decode("utf-8")
                        },
                        "features": [{"type": "TEXT_DETECTION"}],
                    }
                ]
            },
            timeout=30,
        )
        response.raise_for_status()
        results = response.json().get("responses") or [{}]
        result = results[0]
        error = result.get("error")
        if error:
            raise OcrError(f"Vision API error: {error.get('message', error)}")
        annotations = result.get("textAnnotations") or []
        if annotations:
            return annotations[0].get("description", "")
        return (result.get("fullTextAnnotation") or {}).get("text", "")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
