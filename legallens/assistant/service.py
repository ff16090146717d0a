import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime

from legallens.analysis.base import BaseAnalysisClient
from legallens.analysis.context import build_document_context
from legallens.analysis.models import ChatMessage, ClauseExchange, ComparisonResult
from legallens.assistant.exceptions import ClauseNotFoundError, DocumentNotFoundError
from legallens.logging.logger import Log
from legallens.storage.models import Document, utc_now
from legallens.storage.repositories.documents_repository import DocumentsRepository


class AssistantService:
    """Questions, chat and comparisons over already analyzed documents."""

    def __init__(
        self,
        client: BaseAnalysisClient,
        documents_repo: DocumentsRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._client = client
        self._documents_repo = documents_repo
        self._clock = clock

    async def ask_about_clause(
        self, document_id: str, clause_id: str, question: str
    ) -> ClauseExchange:
        """Ask about one clause and append the exchange to its history.

        Raises:
            ValueError: if the question is blank.
            DocumentNotFoundError: if the document does not exist.
            ClauseNotFoundError: if the clause is not in the document.
            AnalysisServiceError: if the service cannot answer.
            StorageError: if the updated document cannot be saved.
        """
        if not question.strip():
            raise ValueError("Question must not be empty")
        document = await self._get_document(document_id)
        clause = document.find_clause(clause_id)
        if clause is None:
            raise ClauseNotFoundError(
                f"Clause {clause_id} not found in document {document_id}"
            )

        answer = await self._client.ask(clause.text, question)
        exchange = ClauseExchange(question=question, answer=answer, timestamp=self._clock())

        # Reload so exchanges appended meanwhile on other clauses are kept.
        latest = await self._get_document(document_id)
        current = latest.find_clause(clause_id) or clause
        updated = latest.with_clause(current.with_exchange(exchange))
        await asyncio.to_thread(self._documents_repo.save, updated)
        Log.info(f"Answered question on clause {clause_id}", document_id=document_id)
        return exchange

    async def chat(
        self,
        history: Sequence[ChatMessage],
        new_message: str,
        document_id: str | None = None,
    ) -> str:
        """Chat about one document, or give general guidance without one."""
        context = None
        if document_id is not None:
            context = build_document_context(await self._get_document(document_id))
        return await self._client.chat(history, new_message, context)

    async def compare(self, document_ids: Sequence[str]) -> ComparisonResult:
        documents = [await self._get_document(document_id) for document_id in document_ids]
        return await self._client.compare(documents)

    async def discuss_difference(
        self,
        history: Sequence[ChatMessage],
        new_message: str,
        document_ids: Sequence[str],
        focused_difference: str,
    ) -> str:
        documents = [await self._get_document(document_id) for document_id in document_ids]
        return await self._client.discuss_difference(
            history, new_message, documents, focused_difference
        )

    async def _get_document(self, document_id: str) -> Document:
        document = await asyncio.to_thread(self._documents_repo.find_by_id, document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document
