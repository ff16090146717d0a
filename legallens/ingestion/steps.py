import asyncio
from collections.abc import Callable
from datetime import datetime

from legallens.analysis.base import BaseAnalysisClient
from legallens.ingestion.file_loader import encode_for_transport
from legallens.ingestion.pipeline import DispatchContext, DispatchStep
from legallens.logging.logger import Log
from legallens.storage.models import Document, RecentAnalysisEntry, new_id, utc_now
from legallens.storage.repositories.documents_repository import DocumentsRepository
from legallens.storage.repositories.recent_analyses_repository import (
    RecentAnalysesRepository,
)


class EncodeContentStep(DispatchStep):
    async def run(self, context: DispatchContext) -> DispatchContext:
        context.encoded_content = await asyncio.to_thread(
            encode_for_transport, context.item.content
        )
        Log.debug(
            f"Encoded {context.item.size_bytes} bytes of {context.item.name}",
            item_id=context.item.id,
        )
        return context


class AnalyzeContentStep(DispatchStep):
    def __init__(self, client: BaseAnalysisClient) -> None:
        self._client = client

    async def run(self, context: DispatchContext) -> DispatchContext:
        context.analysis = await self._client.analyze(
            context.encoded_content, context.item.media_type, file_name=context.item.name
        )
        Log.info(
            f"Analyzed {context.item.name}: {len(context.analysis.clauses)} clauses",
            item_id=context.item.id,
        )
        return context


class BuildDocumentStep(DispatchStep):
    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory

    async def run(self, context: DispatchContext) -> DispatchContext:
        if context.analysis is None:
            raise ValueError("DispatchContext.analysis must be set before building a document")
        context.document = Document(
            id=self._id_factory(),
            user_id=context.user_id,
            file_name=context.item.name,
            upload_date=self._clock(),
            mime_type=context.item.media_type,
            analysis=context.analysis,
            file_data=context.encoded_content,
        )
        return context


class PersistDocumentStep(DispatchStep):
    def __init__(self, documents_repo: DocumentsRepository) -> None:
        self._documents_repo = documents_repo

    async def run(self, context: DispatchContext) -> DispatchContext:
        if context.document is None:
            raise ValueError("DispatchContext.document must be set before persist")
        context.document = await asyncio.to_thread(
            self._documents_repo.save, context.document
        )
        Log.info(f"Saved document {context.document.id}", item_id=context.item.id)
        return context


class CacheRecentAnalysisStep(DispatchStep):
    def __init__(self, recent_repo: RecentAnalysesRepository) -> None:
        self._recent_repo = recent_repo

    async def run(self, context: DispatchContext) -> DispatchContext:
        if context.document is None:
            raise ValueError("DispatchContext.document must be set before caching")
        entry = RecentAnalysisEntry.from_document(context.document)
        await asyncio.to_thread(self._recent_repo.upsert, entry)
        return context
