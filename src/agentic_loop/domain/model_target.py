from pydantic import BaseModel, ConfigDict, Field


class ModelTarget(BaseModel):
    """A decision oracle identified by provider name and model identifier."""

    provider: str = Field(min_length=1, description="Registered provider name.")
    model: str = Field(min_length=1, description="Model identifier.")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, entry: str, default_provider: str) -> "ModelTarget":
        """Parse ``provider:model`` or a bare model name.

        Args:
            entry: Target text.
            default_provider: Provider used when the entry has no prefix.

        Returns:
            The parsed target.

        Raises:
            ValueError: If either part is blank.
        """

        if ":" in entry:
            provider, model = entry.split(":", 1)
        else:
            provider, model = default_provider, entry
        provider, model = provider.strip(), model.strip()
        if not provider or not model:
            raise ValueError(f"Invalid model target: {entry!r}")
        return cls(provider=provider, model=model)

    def __str__(self) -> str:
        return f"{self.provider}/{self.model}"
