from typing import Any

import httpx
import openai

from legallens.analysis.client_base import BaseCompletionClient
from legallens.analysis.exceptions import (
    AnalysisNetworkError,
    AnalysisServiceError,
    MissingCredentialsError,
)
from legallens.analysis.models import InlineData, PromptMessage

_ROLE_MAP = {"user": "user", "model": "assistant", "assistant": "assistant"}
DEFAULT_ATTACHMENT_NAME = "document.pdf"


class OpenAIClientAdapter(BaseCompletionClient):
    """Completion client built on the OpenAI-compatible async chat API.

    The underlying SDK client is created once and reused for every call. An
    adapter without an API key can be constructed but fails on first use.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client: openai.AsyncOpenAI | None = None
        if api_key:
            self._client = openai.AsyncOpenAI(
                api_key=api_key,
                timeout=timeout_seconds,
                base_url=base_url,
            )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        messages: list[PromptMessage],
        json_schema: dict[str, object] | None = None,
        schema_name: str = "response",
    ) -> str:
        if self._client is None:
            raise MissingCredentialsError(
                "API key is missing. Please set ANALYSIS_API_KEY."
            )

        request: dict[str, Any] = {
            "model": model,
            "temperature": temperature,
            "messages": self._build_messages(system_prompt, messages),
        }
        if json_schema is not None:
            request["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": schema_name,
                    "strict": True,
                    "schema": json_schema,
                },
            }

        try:
            response = await self._client.chat.completions.create(**request)
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AnalysisNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise AnalysisNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise AnalysisServiceError("AI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise AnalysisServiceError("AI returned empty response")
        return content

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        if self._client is not None:
            await self._client.close()

    @staticmethod
    def _build_messages(
        system_prompt: str, messages: list[PromptMessage]
    ) -> list[dict[str, Any]]:
        built: list[dict[str, Any]] = []
        if system_prompt:
            built.append({"role": "system", "content": system_prompt})
        for message in messages:
            role = _ROLE_MAP.get(message.role, "user")
            if message.attachment is None:
                built.append({"role": role, "content": message.text})
                continue
            built.append({
                "role": role,
                "content": [
                    OpenAIClientAdapter._attachment_part(message.attachment),
                    {"type": "text", "text": message.text},
                ],
            })
        return built

    @staticmethod
    def _attachment_part(attachment: InlineData) -> dict[str, Any]:
        data_url = f"data:{attachment.media_type};base64,{attachment.data}"
        if attachment.media_type.startswith("image/"):
            return {"type": "image_url", "image_url": {"url": data_url}}
        return {
            "type": "file",
            "file": {
                "filename": attachment.file_name or DEFAULT_ATTACHMENT_NAME,
                "file_data": data_url,
            },
        }
