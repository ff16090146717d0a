"""AI-powered contract analyzer."""

import json
from collections.abc import Sequence
from pathlib import Path

from legallens.analysis.base import BaseAnalysisClient
from legallens.analysis.client_base import BaseCompletionClient
from legallens.analysis.context import build_comparison_context, build_difference_context
from legallens.analysis.exceptions import AnalysisServiceError
from legallens.analysis.models import (
    Analysis,
    ChatMessage,
    ComparisonResult,
    InlineData,
    PromptMessage,
)
from legallens.analysis.prompt_loader import load_json_schema, load_prompt_template
from legallens.analysis.validator import (
    validate_and_build_analysis,
    validate_and_build_comparison,
)
from legallens.logging.logger import Log
from legallens.storage.models import Document


class DocumentAnalyzer(BaseAnalysisClient):
    """Implements the analysis contract on top of a completion client.

    Structured calls (analyze, compare) use the small model at the analysis
    temperature; conversational calls (chat, discuss_difference) use the chat
    model at the chat temperature.
    """

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        chat_model: str | None = None,
        temperature: float = 0.2,
        chat_temperature: float = 0.3,
        prompt_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._chat_model = chat_model or model
        self._temperature = max(0.0, min(1.0, temperature))
        self._chat_temperature = max(0.0, min(1.0, chat_temperature))
        self._analysis_prompt = load_prompt_template("analysis_prompt.txt", prompt_dir)
        self._analysis_schema = load_json_schema("analysis_schema.json", prompt_dir)
        self._comparison_prompt = load_prompt_template("comparison_prompt.txt", prompt_dir)
        self._comparison_schema = load_json_schema("comparison_schema.json", prompt_dir)
        self._clause_prompt = load_prompt_template("clause_question_prompt.txt", prompt_dir)
        self._chat_context_prompt = load_prompt_template("chat_context_prompt.txt", prompt_dir)
        self._chat_general_prompt = load_prompt_template("chat_general_prompt.txt", prompt_dir)
        self._difference_prompt = load_prompt_template("difference_prompt.txt", prompt_dir)

    async def analyze(
        self, encoded_content: str, media_type: str, file_name: str | None = None
    ) -> Analysis:
        Log.debug(f"Analysis prompt:\n{self._analysis_prompt}")
        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt="",
            messages=[
                PromptMessage(
                    role="user",
                    text=self._analysis_prompt,
                    attachment=InlineData(
                        media_type=media_type, data=encoded_content, file_name=file_name
                    ),
                )
            ],
            json_schema=self._analysis_schema,
            schema_name="contract_analysis",
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        analysis = validate_and_build_analysis(self._parse_json(raw_response))
        Log.info(
            f"Analysis complete: {len(analysis.clauses)} clauses, "
            f"risk {analysis.overall_risk.value} ({analysis.risk_score})"
        )
        return analysis

    async def ask(self, clause_text: str, question: str) -> str:
        prompt = self._clause_prompt.format(clause_text=clause_text, question=question)
        answer = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt="",
            messages=[PromptMessage(role="user", text=prompt)],
        )
        return self._require_text(answer)

    async def chat(
        self,
        history: Sequence[ChatMessage],
        new_message: str,
        context: str | None = None,
    ) -> str:
        if context:
            system_prompt = self._chat_context_prompt.format(document_context=context)
        else:
            system_prompt = self._chat_general_prompt
        answer = await self._client.create_chat_completion(
            model=self._chat_model,
            temperature=self._chat_temperature,
            system_prompt=system_prompt,
            messages=self._conversation(history, new_message),
        )
        return self._require_text(answer)

    async def compare(self, documents: Sequence[Document]) -> ComparisonResult:
        if len(documents) < 2:
            raise ValueError("At least two documents are required for a comparison")
        prompt = self._comparison_prompt.format(
            document_count=len(documents),
            documents_context=build_comparison_context(documents),
        )
        Log.debug(f"Comparison prompt:\n{prompt}")
        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt="",
            messages=[PromptMessage(role="user", text=prompt)],
            json_schema=self._comparison_schema,
            schema_name="contract_comparison",
        )
        result = validate_and_build_comparison(
            self._parse_json(raw_response), [d.id for d in documents]
        )
        Log.info(
            f"Comparison complete: recommended {result.recommended_id}, "
            f"{len(result.key_differences)} differences"
        )
        return result

    async def discuss_difference(
        self,
        history: Sequence[ChatMessage],
        new_message: str,
        documents: Sequence[Document],
        focused_difference: str,
    ) -> str:
        system_prompt = self._difference_prompt.format(
            documents_context=build_difference_context(documents),
            focused_difference=focused_difference,
        )
        answer = await self._client.create_chat_completion(
            model=self._chat_model,
            temperature=self._chat_temperature,
            system_prompt=system_prompt,
            messages=self._conversation(history, new_message),
        )
        return self._require_text(answer)

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _conversation(
        history: Sequence[ChatMessage], new_message: str
    ) -> list[PromptMessage]:
        messages = [PromptMessage(role=m.role, text=m.text) for m in history]
        messages.append(PromptMessage(role="user", text=new_message))
        return messages

    @staticmethod
    def _require_text(raw: str) -> str:
        text = raw.strip()
        if not text:
            raise AnalysisServiceError("AI returned empty response")
        return text

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise AnalysisServiceError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise AnalysisServiceError("JSON response must be an object")
        return parsed
