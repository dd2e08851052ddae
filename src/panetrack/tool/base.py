"""Base tool classes with Pydantic parameter validation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from panetrack.tool.truncation import truncate_output

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass
class ToolResult:
    """Base result from a tool execution."""

    output: str = ""
    brief: str = ""  # One-line summary for CLI display
    is_error: bool = False


@dataclass
class ToolOk(ToolResult):
    """Successful tool result."""

    is_error: bool = False


@dataclass
class ToolError(ToolResult):
    """Failed tool result."""

    is_error: bool = True


class BaseTool(ABC, Generic[T]):
    """Base class for all tools.

    Tools are thin adapters: structured input -> tracker call -> text.
    Each tool declares its parameters as a Pydantic model (the type parameter T).

    Usage:
        class MyParams(BaseModel):
            command_id: str

        class MyTool(BaseTool[MyParams]):
            name = "my-tool"
            description = "Does something useful"
            param_model = MyParams

            async def execute(self, params: MyParams) -> ToolResult:
                return ToolOk(output="done")
    """

    name: ClassVar[str]
    description: ClassVar[str]
    param_model: ClassVar[type[BaseModel]]

    async def __call__(self, arguments: dict[str, Any]) -> tuple[str, bool]:
        """Validate arguments, execute, truncate output.

        Returns:
            (content, is_error) tuple suitable for tool result messages.
        """
        try:
            params = self.param_model.model_validate(arguments)
        except ValidationError as e:
            return f"Invalid parameters: {e}", True

        try:
            result = await self.execute(params)  # type: ignore[arg-type]
        except Exception as e:
            logger.error("Tool %s execution error: %s", self.name, e, exc_info=True)
            return f"Error executing {self.name}: {e}", True

        if result.brief:
            logger.debug("%s: %s", self.name, result.brief)
        output = truncate_output(result.output)
        return output, result.is_error

    @abstractmethod
    async def execute(self, params: T) -> ToolResult:
        """Execute the tool with validated parameters."""
        ...

    def to_spec(self) -> dict[str, Any]:
        """Describe the tool as ``{name, description, inputSchema}``."""
        schema = self.param_model.model_json_schema()
        # Clients only need the properties, not Pydantic's title and $defs
        schema.pop("title", None)
        schema.pop("$defs", None)

        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": schema,
        }
