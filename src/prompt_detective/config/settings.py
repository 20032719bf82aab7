"""Configuration settings for the application."""
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "") == "1"


@dataclass
class GenerationSettings:
    provider: str = field(default_factory=lambda: os.getenv("LLM_PROVIDER", "gemini"))
    model_name: str = field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gemini-3-flash-preview")
    )
    # Local mock artifacts instead of LLM calls (tests, offline demos)
    mock_cases: bool = field(default_factory=lambda: _env_flag("MOCK_CASES"))
    retry_delay_seconds: float = 0.5
    temperature: float = 1.0
    max_tokens: int = 2048

    # API Keys
    gemini_api_key: str = field(default_factory=lambda: os.getenv("GEMINI_API_KEY", ""))
    anthropic_api_key: str = field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", "")
    )
    openai_api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))

    def api_key_for(self, provider: str) -> str:
        keys = {
            "gemini": self.gemini_api_key,
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
        }
        return keys.get(provider.lower().strip(), "")


@dataclass
class CacheSettings:
    ttl_seconds: float = 15 * 60
    rate_limit_seconds: float = 10
    sweep_interval: int = 50
    # Entries unread for eviction_multiplier * ttl are swept
    eviction_multiplier: int = 2

    @property
    def max_idle_seconds(self) -> float:
        return self.ttl_seconds * self.eviction_multiplier


@dataclass
class Settings:
    environment: str = field(
        default_factory=lambda: os.getenv("APP_ENV", "development").lower()
    )
    generation: GenerationSettings = field(default_factory=GenerationSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)

    @property
    def debug_endpoints_enabled(self) -> bool:
        return self.environment != "production"


settings = Settings()
