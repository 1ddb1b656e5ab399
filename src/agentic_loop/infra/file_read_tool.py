"""Local file read tool implementation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Type

from pydantic import BaseModel, Field

from agentic_loop.domain.exceptions import ToolExecutionError
from agentic_loop.domain.side_effect_class import SideEffectClass
from agentic_loop.domain.tool import BaseTool, ToolContext


class FileReadArgs(BaseModel):
    file_path: str = Field(
        min_length=1, description="Path to the file, relative to the tool root."
    )


def resolve_within_root(root: Path, file_path: str) -> Path:
    """
    Resolves ``file_path`` against ``root`` and rejects escapes.

    Args:
        root: Directory the tool is confined to.
        file_path: Relative or absolute path requested by the oracle.

    Returns:
        The resolved absolute path.

    Raises:
        ToolExecutionError: If the path lies outside ``root``.
    """
    resolved_root = root.resolve()
    candidate = Path(file_path)
    if not candidate.is_absolute():
        candidate = resolved_root / candidate
    candidate = candidate.resolve()
    if candidate != resolved_root and resolved_root not in candidate.parents:
        raise ToolExecutionError(f"Path escapes tool root: {file_path}")
    return candidate


@dataclass
class FileReadTool(BaseTool):
    """
    Reads a text file below a fixed root directory.
    """

    name: str = "read_file"
    description: str = "Reads a file from the local filesystem."
    args_model: Type[BaseModel] = FileReadArgs
    side_effect_class: SideEffectClass = SideEffectClass.IDEMPOTENT
    root: Path = field(default_factory=Path.cwd)

    async def execute(self, args: FileReadArgs, context: ToolContext) -> str:
        """
        Executes the file read operation.

        Args:
            args: Tool arguments containing the file_path.
            context: Calling run context.

        Returns:
            The file contents.

        Raises:
            ToolExecutionError: If the file is outside the root or unreadable.
        """
        path = resolve_within_root(self.root, args.file_path)
        if not path.is_file():
            raise ToolExecutionError(f"File not found: {args.file_path}")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ToolExecutionError(f"Error reading file: {exc}") from exc
