"""Shared types for the function-calling tools."""
from dataclasses import dataclass, field
from typing import Any, Dict


class UnknownToolError(KeyError):
    """Raised when a tool name is not registered."""


@dataclass
class ToolResult:
    """Outcome of a tool call: a message for the model plus structured data for UIs."""
    text: str
    structured_content: Dict[str, Any] = field(default_factory=dict)
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.text}],
            "structuredContent": self.structured_content,
            "isError": self.is_error,
        }


def error_result(message: str) -> ToolResult:
    return ToolResult(text=message, is_error=True)
