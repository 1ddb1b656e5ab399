from pathlib import Path
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import (
    DotEnvSettingsSource,
    EnvSettingsSource,
    JsonConfigSettingsSource,
)

from agentic_loop.domain.loop_config import LoopConfig
from agentic_loop.domain.model_target import ModelTarget

DEFAULT_APP_DIR = Path(".agentic_loop")
DEFAULT_CONFIG_PATH = DEFAULT_APP_DIR / "config.json"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "SILENT")


class Config(BaseSettings):
    """
    Application configuration loaded from environment variables, .env, and JSON.
    """

    openai_api_key: Optional[SecretStr] = Field(
        default=None, description="OpenAI API key used by the openai provider."
    )
    anthropic_api_key: Optional[SecretStr] = Field(
        default=None, description="Anthropic API key used by the anthropic provider."
    )
    llm_provider: str = Field(default="rule", description="Primary provider name.")
    llm_model: str = Field(default="default", description="Primary model identifier.")
    llm_fallback_models: Optional[str] = Field(
        default=None,
        description="Comma-separated fallbacks, each provider:model or model.",
    )
    loop_max_steps: int = Field(default=6, gt=0)
    loop_max_tool_calls: int = Field(default=4, gt=0)
    loop_timeout_ms: int = Field(default=30_000, gt=0)
    loop_max_messages: int = Field(default=30, gt=0)
    loop_max_repeat_decision_signatures: int = Field(default=2, gt=0)
    log_level: str = Field(default="INFO", description="Logging level name.")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        """Normalize and validate the log level name."""

        normalized = value.strip().upper()
        if normalized == "WARN":
            normalized = "WARNING"
        if normalized not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {value}")
        return normalized

    @staticmethod
    def _secret_to_str(secret: Optional[SecretStr]) -> Optional[str]:
        """Return the underlying secret value if present."""

        if secret is None:
            return None
        return secret.get_secret_value() or None

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """
        Loads configuration from a JSON file when present.

        Environment variables and .env values take precedence over JSON.

        Args:
            path: Optional override path for the JSON config file.

        Returns:
            A validated configuration object.
        """
        config_path = path or DEFAULT_CONFIG_PATH
        if not config_path.exists():
            return cls()

        json_source = JsonConfigSettingsSource(cls, json_file=config_path)
        dotenv_source = DotEnvSettingsSource(cls)
        env_source = EnvSettingsSource(cls)
        merged: dict[str, object] = {}
        merged.update(json_source())
        merged.update(dotenv_source())
        merged.update(env_source())
        return cls.model_validate(merged)

    def get_openai_api_key(self) -> Optional[str]:
        """Returns the OpenAI API key or None if unset."""

        return self._secret_to_str(self.openai_api_key)

    def get_anthropic_api_key(self) -> Optional[str]:
        """Returns the Anthropic API key or None if unset."""

        return self._secret_to_str(self.anthropic_api_key)

    def get_primary_model(self) -> ModelTarget:
        """
        Returns the primary oracle target.

        Returns:
            The configured provider/model pair.
        """
        return ModelTarget(provider=self.llm_provider, model=self.llm_model)

    def get_fallback_models(self) -> List[ModelTarget]:
        """
        Parses the fallback target list.

        Entries are comma-separated. ``provider:model`` selects a provider, a
        bare model uses the primary provider. Blank or malformed entries are
        dropped.

        Returns:
            Fallback targets in configured order.
        """
        if not self.llm_fallback_models:
            return []
        targets: List[ModelTarget] = []
        for entry in self.llm_fallback_models.split(","):
            entry = entry.strip()
            if not entry:
                continue
            try:
                targets.append(ModelTarget.parse(entry, self.llm_provider))
            except ValueError:
                continue
        return targets

    def to_loop_config(self) -> LoopConfig:
        """
        Builds the immutable loop configuration for a run.

        Returns:
            A LoopConfig carrying ceilings and oracle targets.
        """
        return LoopConfig(
            max_steps=self.loop_max_steps,
            max_tool_calls=self.loop_max_tool_calls,
            timeout_ms=self.loop_timeout_ms,
            max_messages=self.loop_max_messages,
            max_repeated_decision_signatures=self.loop_max_repeat_decision_signatures,
            primary_model=self.get_primary_model(),
            fallback_models=self.get_fallback_models(),
        )
