class IngestionError(Exception):
    """Base exception for all batch ingestion errors."""


class FileValidationError(IngestionError):
    """Raised when a submitted file is rejected before entering the batch."""

    def __init__(self, file_name: str, message: str) -> None:
        super().__init__(message)
        self.file_name = file_name


class FileReadError(IngestionError):
    """Raised when a file cannot be read from disk."""


class ConversionError(IngestionError):
    """Raised when file bytes cannot be converted to the transport encoding."""


class ItemNotFoundError(IngestionError):
    """Raised when an upload item id is not part of the batch."""


class ItemNotRemovableError(IngestionError):
    """Raised when removing an item that has already left the pending state."""


class InvalidTransitionError(IngestionError):
    """Raised when an upload item would move backward or skip a state."""
