from collections.abc import Callable
from dataclasses import dataclass

from legallens.ingestion.models import UploadItem, UploadStatus
from legallens.storage.models import Document


@dataclass(frozen=True)
class BatchStarted:
    """Every pending item has moved to processing; no dispatch has settled yet."""

    items: tuple[UploadItem, ...]


@dataclass(frozen=True)
class ItemSettled:
    """One dispatch reached a terminal state. The batch view is not updated yet."""

    item: UploadItem


@dataclass(frozen=True)
class BatchSettled:
    """All dispatches settled and their results were merged into the batch.

    ``navigate_to`` is set only when the batch held exactly one item and it
    succeeded.
    """

    items: tuple[UploadItem, ...]
    navigate_to: Document | None = None

    @property
    def succeeded(self) -> list[UploadItem]:
        return [i for i in self.items if i.status is UploadStatus.SUCCESS]

    @property
    def failed(self) -> list[UploadItem]:
        return [i for i in self.items if i.status is UploadStatus.ERROR]


BatchEvent = BatchStarted | ItemSettled | BatchSettled
BatchListener = Callable[[BatchEvent], None]
