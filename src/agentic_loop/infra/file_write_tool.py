"""Local file write tool implementation."""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Type

from pydantic import BaseModel, Field

from agentic_loop.domain.exceptions import ToolExecutionError
from agentic_loop.domain.side_effect_class import SideEffectClass
from agentic_loop.domain.tool import BaseTool, ToolContext
from agentic_loop.infra.file_read_tool import resolve_within_root

MAX_WRITE_BYTES = 1_000_000


class FileWriteArgs(BaseModel):
    file_path: str = Field(
        min_length=1, description="Path to the file, relative to the tool root."
    )
    content: str = Field(description="Content to write to the file.")


@dataclass
class FileWriteTool(BaseTool):
    """
    Writes content to a file below a fixed root directory.

    Writes go through a temporary sibling file that replaces the target, so a
    failed write never leaves a truncated file behind.
    """

    name: str = "write_file"
    description: str = "Writes content to a file."
    args_model: Type[BaseModel] = FileWriteArgs
    side_effect_class: SideEffectClass = SideEffectClass.NON_IDEMPOTENT
    root: Path = field(default_factory=Path.cwd)
    max_bytes: int = MAX_WRITE_BYTES

    async def execute(self, args: FileWriteArgs, context: ToolContext) -> str:
        """
        Executes the file write operation.

        Args:
            args: Tool arguments containing file_path and content.
            context: Calling run context.

        Returns:
            A confirmation message.

        Raises:
            ToolExecutionError: If the target is outside the root, the content
                is too large, or the write fails.
        """
        data = args.content.encode("utf-8")
        if len(data) > self.max_bytes:
            raise ToolExecutionError(
                f"Content exceeds {self.max_bytes} bytes for {args.file_path}"
            )
        path = resolve_within_root(self.root, args.file_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(temp_name, path)
            except OSError:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise ToolExecutionError(f"Error writing file: {exc}") from exc
        return f"Wrote {len(data)} bytes to {args.file_path}."
