"""Central configuration loaded from environment and key files."""
import os
from dataclasses import dataclass, field
from pathlib import Path

ROOT = Path(__file__).parent


def _read_key(filename: str) -> str:
    path = ROOT / filename
    if path.exists():
        return path.read_text().strip()
    return ""


@dataclass
class AppConfig:
    # Model identifiers per provider
    openai_model: str = "gpt-4o-mini"
    google_model: str = "gemini-2.0-flash"
    anthropic_model: str = "claude-3-haiku-20240307"

    # Sampling (fixed per provider, not per request)
    temperature: float = 0.7
    anthropic_max_tokens: int = 1000
    anthropic_version: str = "2023-06-01"

    # Only the OpenAI-style adapter frames the prompt with a system role
    openai_system_prompt: str = "You are a helpful assistant."

    # Mode used by the CLI when --model is omitted
    default_mode: str = "combined"

    # HTTP service
    host: str = field(default_factory=lambda: os.environ.get("CHAT_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("CHAT_PORT", "8000")))

    # Env var and key file consulted for each provider (env wins)
    key_env_vars: dict[str, str] = field(default_factory=lambda: {
        "openai": "OPENAI_API_KEY",
        "google": "GOOGLE_API_KEY",
        "anthropic": "ANTHROPIC_API_KEY",
    })
    key_files: dict[str, str] = field(default_factory=lambda: {
        "openai": "openai.key",
        "google": "google.key",
        "anthropic": "anthropic.key",
    })

    def read_api_key(self, provider: str) -> str:
        """Return the current key for ``provider``, or "" when none is set.

        Read on every call so rotated keys are picked up without a restart.
        """
        env_name = self.key_env_vars.get(provider)
        if env_name:
            value = os.environ.get(env_name, "").strip()
            if value:
                return value
        filename = self.key_files.get(provider)
        if filename:
            return _read_key(filename)
        return ""


# Singleton
config = AppConfig()
