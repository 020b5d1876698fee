import json
from typing import Any

import httpx
from openai import APIConnectionError, APIStatusError, OpenAI

from conflict_lens.core.errors import ParseError, UpstreamError
from conflict_lens.llm.llm_client import JSON_ONLY_DIRECTIVE, LLMClient


class OpenAIClient(LLMClient):
    def __init__(self, model_name: str, api_key: str | None = None, client: OpenAI | None = None):
        self.model_name = model_name
        # Keine SDK-internen Retries: Retry-Policy gehört dem Aufrufer
        self.client = client or OpenAI(api_key=api_key, max_retries=0)

    def generate_json(self, instructions: str, input: str) -> Any:
        try:
            response = self.client.responses.create(
                model=self.model_name,
                instructions=f"{instructions}\n{JSON_ONLY_DIRECTIVE}",
                input=input,
            )
        except APIStatusError as exc:
            raise UpstreamError(exc.status_code, _response_text(exc)) from exc
        except APIConnectionError as exc:
            raise UpstreamError(None, str(exc)) from exc

        text = getattr(response, "output_text", None) or ""
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(text, reason=exc.msg) from exc


def _response_text(exc: APIStatusError) -> str:
    try:
        return exc.response.text
    except httpx.ResponseNotRead:
        # gestreamte Antwort ohne gelesenen Body
        return str(exc)
