import asyncio
from collections.abc import Callable, Iterable

from legallens.analysis.base import BaseAnalysisClient
from legallens.ingestion.events import (
    BatchEvent,
    BatchListener,
    BatchSettled,
    BatchStarted,
    ItemSettled,
)
from legallens.ingestion.exceptions import (
    FileValidationError,
    ItemNotFoundError,
    ItemNotRemovableError,
)
from legallens.ingestion.models import CandidateFile, SubmitResult, UploadItem, UploadStatus
from legallens.ingestion.processor import ItemProcessor, build_item_processor
from legallens.logging.logger import Log
from legallens.storage.backend import LocalStore
from legallens.storage.repositories.documents_repository import DocumentsRepository
from legallens.storage.repositories.recent_analyses_repository import (
    RecentAnalysesRepository,
)


class UploadBatch:
    """Tracks a set of submitted files and analyzes them together.

    Items are added as pending by submit() and only start processing when
    analyze_all() is called. All pending items are dispatched concurrently;
    their results are merged back into the batch in a single step once every
    dispatch has settled. Listeners registered with subscribe() receive
    BatchStarted, ItemSettled and BatchSettled events.
    """

    def __init__(self, processor: ItemProcessor) -> None:
        self._processor = processor
        self._items: list[UploadItem] = []
        self._listeners: list[BatchListener] = []

    @property
    def items(self) -> tuple[UploadItem, ...]:
        return tuple(self._items)

    @property
    def is_settled(self) -> bool:
        """True when no item is pending or processing."""
        return all(item.is_terminal for item in self._items)

    def subscribe(self, listener: BatchListener) -> Callable[[], None]:
        """Register a listener and return a callable that unregisters it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def submit(self, files: Iterable[CandidateFile]) -> SubmitResult:
        """Append every file with an accepted media type as a pending item.

        Rejected files are reported individually and never block the others.
        """
        result = SubmitResult()
        for candidate in files:
            try:
                candidate.validate()
            except FileValidationError as exc:
                Log.warning(f"Rejected {candidate.name}: {exc}")
                result.rejected.append(exc)
                continue
            item = UploadItem.from_candidate(candidate)
            self._items.append(item)
            result.accepted.append(item)
        Log.info(
            f"Submitted {len(result.accepted)} files, rejected {len(result.rejected)}"
        )
        return result

    def remove(self, item_id: str) -> UploadItem:
        """Remove a pending item from the batch.

        Raises:
            ItemNotFoundError: if no item has this id.
            ItemNotRemovableError: if the item is no longer pending.
        """
        index = self._index_of(item_id)
        item = self._items[index]
        if item.status is not UploadStatus.PENDING:
            raise ItemNotRemovableError(
                f"Item {item.name} is {item.status.value} and cannot be removed"
            )
        del self._items[index]
        return item

    async def analyze_all(self) -> BatchSettled | None:
        """Dispatch every pending item and wait for all of them to settle.

        Returns None without dispatching anything when no item is pending.
        """
        pending = [item for item in self._items if item.status is UploadStatus.PENDING]
        if not pending:
            Log.info("No pending items to analyze")
            return None

        batch_size = len(self._items)
        processing = [item.start_processing() for item in pending]
        self._merge(processing)
        self._emit(BatchStarted(items=self.items))
        Log.info(f"Analyzing {len(processing)} of {batch_size} items")

        results = await asyncio.gather(*(self._dispatch(item) for item in processing))
        self._merge(results)

        navigate_to = None
        if batch_size == 1 and results[0].status is UploadStatus.SUCCESS:
            navigate_to = results[0].document
        settled = BatchSettled(items=self.items, navigate_to=navigate_to)
        Log.info(
            f"Batch settled: {len(settled.succeeded)} succeeded, {len(settled.failed)} failed"
        )
        self._emit(settled)
        return settled

    async def _dispatch(self, item: UploadItem) -> UploadItem:
        settled = await self._processor.process(item)
        self._emit(ItemSettled(item=settled))
        return settled

    def _merge(self, updates: Iterable[UploadItem]) -> None:
        by_id = {item.id: item for item in updates}
        self._items = [by_id.get(item.id, item) for item in self._items]

    def _emit(self, event: BatchEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:
                Log.error(f"Batch listener failed on {type(event).__name__}: {exc}")

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise ItemNotFoundError(f"Item {item_id} is not part of this batch")


def build_upload_batch(
    client: BaseAnalysisClient,
    store: LocalStore,
    user_id: str,
) -> UploadBatch:
    """Build an UploadBatch for one user sharing a long-lived analysis client."""
    processor = build_item_processor(
        client=client,
        documents_repo=DocumentsRepository(store),
        recent_repo=RecentAnalysesRepository(store),
        user_id=user_id,
    )
    return UploadBatch(processor)
