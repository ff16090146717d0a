class AssistantError(Exception):
    """Base exception for document assistant operations."""


class DocumentNotFoundError(AssistantError):
    """Raised when a document id is not in the store."""


class ClauseNotFoundError(AssistantError):
    """Raised when a clause id is not part of the document."""
