"""Builds settings and per-run loop configuration on demand."""

from pathlib import Path
from typing import Optional

from agentic_loop.config import Config
from agentic_loop.domain.loop_config import AgentLoopOverrides, LoopConfig


class ConfigProvider:
    """
    Loads settings lazily so importing the CLI has no side effects.

    The first ``load`` call caches the settings; later calls reuse them.

    Args:
        path: Optional override path for the JSON config file.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._config: Optional[Config] = None

    def load(self) -> Config:
        if self._config is None:
            self._config = Config.load(self._path)
        return self._config

    def loop_config(self, overrides: Optional[AgentLoopOverrides] = None) -> LoopConfig:
        """
        Returns the immutable loop configuration for one run.

        Args:
            overrides: Optional per-agent ceilings applied on top of settings.

        Returns:
            A LoopConfig with the overrides applied.
        """
        return self.load().to_loop_config().with_overrides(overrides)
