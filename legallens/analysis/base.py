from abc import ABC, abstractmethod
from collections.abc import Sequence

from legallens.analysis.models import Analysis, ChatMessage, ComparisonResult
from legallens.storage.models import Document


class BaseAnalysisClient(ABC):
    """Contract for the document-understanding service.

    Every method raises AnalysisServiceError (or a subclass) on failure.
    """

    @abstractmethod
    async def analyze(
        self, encoded_content: str, media_type: str, file_name: str | None = None
    ) -> Analysis:
        """Analyze one document.

        Args:
            encoded_content: base64 transport encoding of the file bytes.
            media_type: declared media type, e.g. "application/pdf".
            file_name: original file name, forwarded to providers that accept one.

        Returns:
            Analysis with summary, risk classification, clauses and full text.
        """

    @abstractmethod
    async def ask(self, clause_text: str, question: str) -> str:
        """Answer a short question about a single clause."""

    @abstractmethod
    async def chat(
        self,
        history: Sequence[ChatMessage],
        new_message: str,
        context: str | None = None,
    ) -> str:
        """Continue a conversation, grounded in context when it is given."""

    @abstractmethod
    async def compare(self, documents: Sequence[Document]) -> ComparisonResult:
        """Recommend one of several analyzed documents, naming them by file name."""

    @abstractmethod
    async def discuss_difference(
        self,
        history: Sequence[ChatMessage],
        new_message: str,
        documents: Sequence[Document],
        focused_difference: str,
    ) -> str:
        """Answer a follow-up question about one key difference between documents."""

    async def aclose(self) -> None:
        """Release resources held by the underlying provider client."""
        return None
