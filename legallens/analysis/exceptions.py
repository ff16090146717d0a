class AnalysisServiceError(Exception):
    """Raised when the document analysis service fails."""


class AnalysisValidationError(AnalysisServiceError):
    """Raised when the service response fails domain validation."""


class AnalysisNetworkError(AnalysisServiceError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class MissingCredentialsError(AnalysisServiceError):
    """Raised when a provider call is attempted without an API key."""
