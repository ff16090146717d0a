from abc import ABC, abstractmethod
from dataclasses import dataclass

from legallens.analysis.models import Analysis
from legallens.ingestion.models import UploadItem
from legallens.storage.models import Document


@dataclass(slots=True)
class DispatchContext:
    """State accumulated while one upload item moves through the dispatch steps."""

    item: UploadItem
    user_id: str
    encoded_content: str = ""
    analysis: Analysis | None = None
    document: Document | None = None


class DispatchStep(ABC):
    @abstractmethod
    async def run(self, context: DispatchContext) -> DispatchContext:
        raise NotImplementedError
