"""Function-calling tools for the cart and the catalog."""
from typing import Any, Awaitable, Callable, Dict, List, Optional

from webshop.utils.logging import get_logger
from .base import ToolResult, UnknownToolError, error_result
from .catalog import get_search_catalog_function, execute_search_catalog
from .cart import (
    get_add_article_to_cart_function,
    get_add_multiple_articles_to_cart_function,
    get_get_cart_function,
    get_update_cart_position_function,
    get_remove_article_from_cart_function,
    get_clear_cart_function,
    get_submit_cart_function,
    execute_add_article_to_cart,
    execute_add_multiple_articles_to_cart,
    execute_get_cart,
    execute_update_cart_position,
    execute_remove_article_from_cart,
    execute_clear_cart,
    execute_submit_cart
)

logger = get_logger(__name__)

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    get_search_catalog_function(),
    get_add_article_to_cart_function(),
    get_add_multiple_articles_to_cart_function(),
    get_get_cart_function(),
    get_update_cart_position_function(),
    get_remove_article_from_cart_function(),
    get_clear_cart_function(),
    get_submit_cart_function()
]

# Tool name -> adapter from raw JSON arguments to the executor
_EXECUTORS: Dict[str, Callable[[Dict[str, Any]], Awaitable[ToolResult]]] = {
    "search_catalog": lambda args: execute_search_catalog(args.get("searchTerm")),
    "add_article_to_cart": lambda args: execute_add_article_to_cart(
        args.get("username"), args.get("articleNumber"), args.get("quantity", 1)
    ),
    "add_multiple_articles_to_cart": lambda args: execute_add_multiple_articles_to_cart(
        args.get("username"), args.get("positions")
    ),
    "get_cart": lambda args: execute_get_cart(args.get("username")),
    "update_cart_position": lambda args: execute_update_cart_position(
        args.get("username"), args.get("articleNumber"), args.get("quantity")
    ),
    "remove_article_from_cart": lambda args: execute_remove_article_from_cart(
        args.get("username"), args.get("articleNumber")
    ),
    "clear_cart": lambda args: execute_clear_cart(args.get("username")),
    "submit_cart": lambda args: execute_submit_cart(args.get("username"))
}


def tool_names() -> List[str]:
    return [definition["function"]["name"] for definition in TOOL_DEFINITIONS]


async def execute_tool(name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
    """
    Execute a tool by name.

    Args:
        name: Tool name as listed in TOOL_DEFINITIONS
        arguments: JSON arguments from the model

    Returns:
        Tool result; unexpected failures are reported as error results

    Raises:
        UnknownToolError: If no tool has this name
    """
    executor = _EXECUTORS.get(name)
    if executor is None:
        raise UnknownToolError(name)

    try:
        return await executor(arguments or {})
    except Exception as e:
        logger.exception("Error executing tool %s", name)
        return error_result(f"Error executing {name}: {e}")


__all__ = [
    "TOOL_DEFINITIONS",
    "ToolResult",
    "UnknownToolError",
    "execute_tool",
    "tool_names",
    "get_search_catalog_function",
    "execute_search_catalog",
    "get_add_article_to_cart_function",
    "get_add_multiple_articles_to_cart_function",
    "get_get_cart_function",
    "get_update_cart_position_function",
    "get_remove_article_from_cart_function",
    "get_clear_cart_function",
    "get_submit_cart_function",
    "execute_add_article_to_cart",
    "execute_add_multiple_articles_to_cart",
    "execute_get_cart",
    "execute_update_cart_position",
    "execute_remove_article_from_cart",
    "execute_clear_cart",
    "execute_submit_cart"
]
