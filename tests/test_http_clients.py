"""Tests for HTTP-based adapters."""

import asyncio
import base64
import json

import httpx
import pytest

from glycoscan.adapters.openai_label_client import OpenAILabelClient
from glycoscan.adapters.vision_ocr_client import HttpxVisionOcrClient
from glycoscan.services.llm import LabelExtractionError
from glycoscan.services.ocr import OcrError


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str) -> None:
        self.responses = _FakeResponses(output_text)


def _vision_client(handler) -> HttpxVisionOcrClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxVisionOcrClient(
        api_key="key",
        base_url="https://vision.test/v1",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_openai_label_client_parses_output() -> None:
    fake = _FakeOpenAI(json.dumps({"calories": 90}))
    client = OpenAILabelClient(client=fake)

    result = asyncio.run(
        client.extract(
            model="gpt-5.2",
            reasoning_effort="low",
            store=False,
            schema={"type": "object"},
            prompt="Read this label",
        )
    )

    assert result == {"calories": 90}
    payload = fake.responses.last_payload
    assert payload is not None
    assert payload["reasoning"] == {"effort": "low"}
    assert payload["text"]["format"]["name"] == "nutrition_label"
    assert payload["text"]["format"]["strict"] is True
    assert payload["input"] == "Read this label"


def test_openai_label_client_omits_empty_reasoning() -> None:
    fake = _FakeOpenAI(json.dumps({}))
    client = OpenAILabelClient(client=fake)

    asyncio.run(
        client.extract(
            model="gpt-5.2",
            reasoning_effort=None,
            store=True,
            schema={"type": "object"},
            prompt="Read this label",
        )
    )

    assert fake.responses.last_payload is not None
    assert "reasoning" not in fake.responses.last_payload
    assert fake.responses.last_payload["store"] is True


def test_openai_label_client_rejects_empty_output() -> None:
    client = OpenAILabelClient(client=_FakeOpenAI(""))

    with pytest.raises(LabelExtractionError, match="empty response"):
        asyncio.run(
            client.extract(
                model="gpt-5.2",
                reasoning_effort="low",
                store=False,
                schema={"type": "object"},
                prompt="Read this label",
            )
        )


@pytest.mark.parametrize(
    ("output_text", "message"),
    [("calories: 90", "not valid JSON"), ("[90]", "not a JSON object")],
)
def test_openai_label_client_rejects_unusable_output(
    output_text: str, message: str
) -> None:
    client = OpenAILabelClient(client=_FakeOpenAI(output_text))

    with pytest.raises(LabelExtractionError, match=message):
        asyncio.run(
            client.extract(
                model="gpt-5.2",
                reasoning_effort="low",
                store=False,
                schema={"type": "object"},
                prompt="Read this label",
            )
        )


def test_vision_client_returns_full_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/images:annotate"
        assert request.url.params["key"] == "key"
        body = json.loads(request.content.decode())
        image = body["requests"][0]["image"]["content"]
        assert base64.b64decode(image) == b"label-image"
        assert body["requests"][0]["features"] == [{"type": "TEXT_DETECTION"}]
        return httpx.Response(
            200,
            json={
                "responses": [
                    {
                        "textAnnotations": [
                            {"description": "Calories 90\nProtein 1g"},
                            {"description": "Calories"},
                        ]
                    }
                ]
            },
        )

    client = _vision_client(handler)

    text = asyncio.run(client.detect_text(b"label-image"))

    assert text == "Calories 90\nProtein 1g"


def test_vision_client_falls_back_to_full_text_annotation() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"responses": [{"fullTextAnnotation": {"text": "Fat 1g"}}]}
        )

    text = asyncio.run(_vision_client(handler).detect_text(b"image"))

    assert text == "Fat 1g"


def test_vision_client_returns_empty_text_for_blank_image() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"responses": [{}]})

    assert asyncio.run(_vision_client(handler).detect_text(b"image")) == ""


def test_vision_client_raises_on_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"responses": [{"error": {"message": "Bad image data."}}]}
        )

    with pytest.raises(OcrError, match="Bad image data"):
        asyncio.run(_vision_client(handler).detect_text(b"image"))


def test_vision_client_raises_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": {"message": "denied"}})

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(_vision_client(handler).detect_text(b"image"))
