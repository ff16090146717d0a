from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    storage_dir: str = ".legallens"
    storage_quota_bytes: int = 5 * 1024 * 1024

    analysis_provider: str = "openai"
    analysis_api_key: str = ""
    analysis_base_url: str = ""
    analysis_model_name: str = "gpt-4o-mini"
    chat_model_name: str = "gpt-4o"
    analysis_timeout_seconds: int = 60
    analysis_temperature: float = 0.2
    chat_temperature: float = 0.3
