"""Tool invocation routes for LLM clients."""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, HTTPException, status
from pydantic import BaseModel, Field

from webshop.querying.tools import TOOL_DEFINITIONS, UnknownToolError, execute_tool

router = APIRouter(prefix="/tools", tags=["tools"])


class ToolContent(BaseModel):
    type: str = "text"
    text: str


class ToolCallResponse(BaseModel):
    """Result of a tool call."""
    content: List[ToolContent]
    structuredContent: Dict[str, Any] = Field(default_factory=dict)
    isError: bool = False


@router.get("", summary="List available tools")
def list_tools() -> List[Dict[str, Any]]:
    """Return the OpenAI function definitions of all tools."""
    return TOOL_DEFINITIONS


@router.post("/{name}", response_model=ToolCallResponse, summary="Invoke a tool")
async def call_tool(name: str, arguments: Optional[Dict[str, Any]] = Body(default=None)):
    """
    Invoke a tool with the JSON arguments produced by the model.

    Invalid arguments are reported inside the result (``isError``) so the
    model can correct itself; only unknown tool names are HTTP errors.
    """
    try:
        result = await execute_tool(name, arguments)
    except UnknownToolError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown tool: {name}"
        )
    return result.to_dict()
