from typing import ClassVar

from legallens.analysis.analyzer import DocumentAnalyzer
from legallens.analysis.base import BaseAnalysisClient
from legallens.analysis.client_base import BaseCompletionClient
from legallens.analysis.example_client_adapter import ExampleClientAdapter
from legallens.analysis.openai_client_adapter import OpenAIClientAdapter
from legallens.config.settings import Settings


class AnalysisClientFactory:
    """Creates the long-lived analysis client configured in settings."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    # Local servers accept any non-empty key.
    KEYLESS_PROVIDERS: ClassVar[frozenset[str]] = frozenset({"ollama"})

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalysisClient:
        """Create a configured analyzer from application settings."""
        provider = settings.analysis_provider.lower()
        return DocumentAnalyzer(
            client=cls._create_completion_client(provider, settings),
            model=settings.analysis_model_name,
            chat_model=settings.chat_model_name,
            temperature=settings.analysis_temperature,
            chat_temperature=settings.chat_temperature,
        )

    @classmethod
    def _create_completion_client(
        cls, provider: str, settings: Settings
    ) -> BaseCompletionClient:
        if provider == "example":
            return ExampleClientAdapter()
        api_key = settings.analysis_api_key
        if not api_key and provider in cls.KEYLESS_PROVIDERS:
            api_key = provider
        return OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=settings.analysis_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.analysis_base_url.strip()
            if not url:
                raise ValueError(
                    "analysis_base_url is required for analysis_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown analysis provider '{provider}'. Choose from: {supported}"
        )
