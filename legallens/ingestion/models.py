import uuid
from dataclasses import dataclass, field, replace
from enum import Enum

from legallens.ingestion.exceptions import FileValidationError, InvalidTransitionError
from legallens.storage.models import Document

ACCEPTED_MEDIA_TYPES = frozenset({
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/webp",
})


class UploadStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


_ALLOWED_TRANSITIONS: dict[UploadStatus, frozenset[UploadStatus]] = {
    UploadStatus.PENDING: frozenset({UploadStatus.PROCESSING}),
    UploadStatus.PROCESSING: frozenset({UploadStatus.SUCCESS, UploadStatus.ERROR}),
    UploadStatus.SUCCESS: frozenset(),
    UploadStatus.ERROR: frozenset(),
}


@dataclass(frozen=True)
class CandidateFile:
    """A file offered for submission, before validation."""

    name: str
    media_type: str
    content: bytes = field(repr=False)

    def validate(self) -> None:
        """Raises FileValidationError when the media type is not accepted."""
        if self.media_type not in ACCEPTED_MEDIA_TYPES:
            raise FileValidationError(
                self.name,
                f'File "{self.name}" has an invalid format. Please upload PDF or Images.',
            )


@dataclass(frozen=True)
class UploadItem:
    """One submitted file moving through pending -> processing -> success|error.

    Items are immutable; every transition returns a new item with the same id.
    """

    id: str
    name: str
    media_type: str
    content: bytes = field(repr=False)
    status: UploadStatus = UploadStatus.PENDING
    error: str | None = None
    document: Document | None = field(default=None, repr=False)

    @classmethod
    def from_candidate(cls, candidate: CandidateFile) -> "UploadItem":
        return cls(
            id=uuid.uuid4().hex,
            name=candidate.name,
            media_type=candidate.media_type,
            content=candidate.content,
        )

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def is_terminal(self) -> bool:
        return self.status in (UploadStatus.SUCCESS, UploadStatus.ERROR)

    def start_processing(self) -> "UploadItem":
        return self._transition(UploadStatus.PROCESSING)

    def succeed(self, document: Document) -> "UploadItem":
        return self._transition(UploadStatus.SUCCESS, document=document)

    def fail(self, reason: str) -> "UploadItem":
        return self._transition(UploadStatus.ERROR, error=reason)

    def _transition(self, status: UploadStatus, **changes: object) -> "UploadItem":
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Item {self.id} cannot move from {self.status.value} to {status.value}"
            )
        return replace(self, status=status, **changes)


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of one submission: items accepted as pending and files rejected."""

    accepted: list[UploadItem] = field(default_factory=list)
    rejected: list[FileValidationError] = field(default_factory=list)
