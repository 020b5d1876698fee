from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from conflict_lens.core.errors import ConfigurationError


class Settings(BaseSettings):
    # .env wird automatisch gelesen; nach dem Start unveränderlich
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app_name: str = "conflict-lens"
    app_version: str = "0.1.0"

    openai_api_key: str = ""
    openai_model: str = "gpt-5"

    # Analytics ist nur aktiv, wenn Key UND Host gesetzt sind
    posthog_api_key: str = ""
    posthog_host: str = ""
    telemetry_timeout: float = 5.0

    port: int = 3000
    log_level: str = "INFO"

    # Kommagetrennte Host-Header für /mcp, z.B. "conflict-lens.example.com,localhost:*".
    # Leer: kein Host-Check (öffentlich erreichbar hinter Reverse Proxy)
    mcp_allowed_hosts: str = ""

    # TEST_MODE=1: FakeLLMClient statt OpenAI, kein API-Key nötig
    test_mode: bool = False

    @property
    def analytics_enabled(self) -> bool:
        return bool(self.posthog_api_key and self.posthog_host)

    @property
    def mcp_allowed_host_list(self) -> list[str]:
        return [h.strip() for h in self.mcp_allowed_hosts.split(",") if h.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Einmalig gebaute Konfiguration für den ganzen Prozess."""
    return Settings()


def validate_startup_config(settings: Settings) -> None:
    """Validiert kritische Umgebungsvariablen beim Startup (fail-fast)."""
    errors = []

    if not settings.test_mode and not settings.openai_api_key:
        errors.append(
            "OPENAI_API_KEY is not set. "
            "Set it in .env file or as environment variable. "
            "Required for claim extraction and conflict auditing."
        )

    if not 0 < settings.port < 65536:
        errors.append(f"PORT must be between 1 and 65535, got {settings.port}.")

    if errors:
        error_msg = "Startup validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)
