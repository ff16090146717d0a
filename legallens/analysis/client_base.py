from abc import ABC, abstractmethod

from legallens.analysis.models import PromptMessage


class BaseCompletionClient(ABC):
    """Contract for provider-specific AI completion clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        messages: list[PromptMessage],
        json_schema: dict[str, object] | None = None,
        schema_name: str = "response",
    ) -> str:
        """Return provider response as plain text.

        When json_schema is given the provider is asked for structured output
        conforming to it, and the text is the JSON document.
        """

    async def aclose(self) -> None:
        """Release provider connections. Clients without any keep the default no-op."""
        return None
