from collections.abc import Callable
from datetime import datetime

from legallens.analysis.base import BaseAnalysisClient
from legallens.analysis.exceptions import AnalysisServiceError, MissingCredentialsError
from legallens.ingestion.exceptions import ConversionError
from legallens.ingestion.models import UploadItem
from legallens.ingestion.pipeline import DispatchContext, DispatchStep
from legallens.ingestion.steps import (
    AnalyzeContentStep,
    BuildDocumentStep,
    CacheRecentAnalysisStep,
    EncodeContentStep,
    PersistDocumentStep,
)
from legallens.logging.logger import Log
from legallens.storage.exceptions import StorageError, StorageQuotaExceededError
from legallens.storage.models import utc_now
from legallens.storage.repositories.documents_repository import DocumentsRepository
from legallens.storage.repositories.recent_analyses_repository import (
    RecentAnalysesRepository,
)


def describe_failure(exc: Exception) -> str:
    """Short human-readable reason shown for a failed item."""
    if isinstance(exc, ConversionError):
        return f"Could not read file: {exc}"
    if isinstance(exc, MissingCredentialsError):
        return f"Analysis service is not configured: {exc}"
    if isinstance(exc, AnalysisServiceError):
        return f"Failed to analyze: {exc}"
    if isinstance(exc, StorageQuotaExceededError):
        return "Storage is full, the analysis could not be saved"
    if isinstance(exc, StorageError):
        return f"Failed to save analysis: {exc}"
    return "Failed to analyze"


class ItemProcessor:
    """Runs one processing item through the dispatch steps.

    Pipeline: encode -> analyze -> build document -> persist -> cache recent.
    Any step failure ends the item in the error state; nothing is retried.
    """

    def __init__(self, steps: list[DispatchStep], user_id: str) -> None:
        self._steps = steps
        self._user_id = user_id

    async def process(self, item: UploadItem) -> UploadItem:
        """Return the item in a terminal state. Step failures never propagate."""
        Log.info(f"Processing {item.name} ({item.size_bytes} bytes)", item_id=item.id)
        context = DispatchContext(item=item, user_id=self._user_id)
        try:
            for step in self._steps:
                context = await step.run(context)
        except Exception as exc:
            Log.error(f"Failed to process {item.name}: {exc}", item_id=item.id)
            return item.fail(describe_failure(exc))

        if context.document is None:
            Log.error(f"No document produced for {item.name}", item_id=item.id)
            return item.fail("Failed to analyze")
        Log.info(f"Processed {item.name}", item_id=item.id, document_id=context.document.id)
        return item.succeed(context.document)


def build_item_processor(
    client: BaseAnalysisClient,
    documents_repo: DocumentsRepository,
    recent_repo: RecentAnalysesRepository,
    user_id: str,
    clock: Callable[[], datetime] = utc_now,
) -> ItemProcessor:
    """Build an ItemProcessor with the standard dispatch steps."""
    steps: list[DispatchStep] = [
        EncodeContentStep(),
        AnalyzeContentStep(client),
        BuildDocumentStep(clock=clock),
        PersistDocumentStep(documents_repo),
        CacheRecentAnalysisStep(recent_repo),
    ]
    return ItemProcessor(steps, user_id)
