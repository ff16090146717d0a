"""Example completion client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseCompletionClient and register the provider in AnalysisClientFactory.
"""

import json
import re
from typing import ClassVar

from legallens.analysis.client_base import BaseCompletionClient
from legallens.analysis.models import PromptMessage

_DOCUMENT_ID_PATTERN = re.compile(r'"id":\s*"([^"]+)"')


class ExampleClientAdapter(BaseCompletionClient):
    """Example adapter that returns fixed, schema-valid responses.

    No network calls. Useful for local development, tests, and as a template
    for building real provider adapters. Comparisons recommend the first
    document listed in the prompt.
    """

    DEFAULT_ANALYSIS: ClassVar[dict[str, object]] = {
        "summary": (
            "This document does not appear to contain any legal terms or "
            "binding obligations."
        ),
        "overallRisk": "Low",
        "riskScore": 0,
        "clauses": [],
        "fullText": "",
    }
    DEFAULT_ANSWER: ClassVar[str] = "This is an example answer. No AI provider is configured."

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
        _ = model, temperature, system_prompt
        if json_schema is None:
            return self.DEFAULT_ANSWER
        if schema_name == "contract_comparison":
            return json.dumps(self._comparison(messages))
        return json.dumps(self.DEFAULT_ANALYSIS)

    @staticmethod
    def _comparison(messages: list[PromptMessage]) -> dict[str, object]:
        prompt = messages[-1].text if messages else ""
        match = _DOCUMENT_ID_PATTERN.search(prompt)
        return {
            "recommendedId": match.group(1) if match else "",
            "reasoning": "Example comparison. No AI provider is configured.",
            "keyDifferences": [],
        }
