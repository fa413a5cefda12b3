"""OpenAI Responses API client for label extraction."""

import json
import logging
from dataclasses import dataclass

from openai import AsyncOpenAI

from glycoscan.services.llm import LabelClient, LabelExtractionError

SCHEMA_NAME = "nutrition_label"

_logger = logging.getLogger(__name__)


@dataclass
class OpenAILabelClient(LabelClient):
    """Reads label text with a strict JSON schema over the Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAILabelClient":
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def extract(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Send the OCR prompt and return the decoded label object."""
        response = await self.client.responses.create(
            model=model,
            input=prompt,
            text={
                "format": {
                    "type": "json_schema",
                    "name": SCHEMA_NAME,
                    "strict": True,
                    "schema": schema,
                }
            },
            store=store,
            **_reasoning_options(reasoning_effort),
        )
        return _decode_label(response.output_text)

    async def close(self) -> None:
        await self.client.close()


def _reasoning_options(effort: str | None) -> dict[str, object]:
    return {"reasoning": {"effort": effort}} if effort else {}


def _decode_label(output_text: str | None) -> dict[str, object]:
    if not output_text:
        raise LabelExtractionError("OpenAI returned an empty response")
    try:
        decoded = json.loads(output_text)
    except json.JSONDecodeError as exc:
        _logger.debug("Undecodable label reply: %r", output_text[:200])
        raise LabelExtractionError("OpenAI reply is not valid JSON") from exc
    if not isinstance(decoded, dict):
        raise LabelExtractionError("OpenAI reply is not a JSON object")
    return decoded
