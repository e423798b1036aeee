"""Cart management tools using OpenAI function calling."""
from typing import Any, Dict, List, Optional

from webshop.utils.cart import CartLine, CartStore, cart_store
from webshop.utils.enrichment import CartEnrichmentService, get_enrichment_service
from webshop.utils.orders import OrderService, order_service
from webshop.utils.validation import (
    CartValidationError,
    validate_article_number,
    validate_quantity,
    validate_username
)
from .base import ToolResult, error_result

USERNAME_PARAMETER = {
    "type": "string",
    "description": "Username that owns the cart",
    "minLength": 1
}

ARTICLE_NUMBER_PARAMETER = {
    "type": "string",
    "description": "Catalog article number",
    "minLength": 1
}


def get_add_article_to_cart_function() -> Dict[str, Any]:
    """
    Get OpenAI function definition for adding an article to the cart.

    Returns:
        OpenAI function definition
    """
    return {
        "type": "function",
        "function": {
            "name": "add_article_to_cart",
            "description": "Adds an article to the shopping cart for a specific user. If the article is already in the cart the quantity is added to it. The quantity parameter is optional and defaults to 1.",
            "parameters": {
                "type": "object",
                "properties": {
                    "username": USERNAME_PARAMETER,
                    "articleNumber": ARTICLE_NUMBER_PARAMETER,
                    "quantity": {
                        "type": "integer",
                        "description": "Quantity to add",
                        "minimum": 1,
                        "default": 1
                    }
                },
                "required": ["username", "articleNumber"]
            }
        }
    }


async def execute_add_article_to_cart(
    username: Any,
    article_number: Any,
    quantity: Any = 1,
    store: Optional[CartStore] = None
) -> ToolResult:
    """
    Execute adding an article to the cart.

    Args:
        username: User the cart belongs to
        article_number: Article number to add
        quantity: Quantity to add (default 1)
        store: Optional cart store (defaults to the global one)

    Returns:
        Tool result
    """
    store = store or cart_store
    try:
        article_number = validate_article_number(article_number)
        username = validate_username(username)
        quantity = validate_quantity(1 if quantity is None else quantity)
    except CartValidationError as e:
        return error_result(str(e))

    cart = store.add_line(username, article_number, quantity)
    position = cart.find(article_number)
    return ToolResult(
        text=(
            f'Added {quantity} of article {article_number} to cart for user "{username}". '
            f"Current quantity: {position.quantity}."
        ),
        structured_content={"cart": {**cart.to_dict(), "username": username}}
    )


def get_add_multiple_articles_to_cart_function() -> Dict[str, Any]:
    """
    Get OpenAI function definition for adding several articles at once.

    Returns:
        OpenAI function definition
    """
    return {
        "type": "function",
        "function": {
            "name": "add_multiple_articles_to_cart",
            "description": "Adds multiple articles to the shopping cart for a specific user. Each position should have an articleNumber and an optional quantity (defaults to 1).",
            "parameters": {
                "type": "object",
                "properties": {
                    "username": USERNAME_PARAMETER,
                    "positions": {
                        "type": "array",
                        "minItems": 1,
                        "items": {
                            "type": "object",
                            "properties": {
                                "articleNumber": ARTICLE_NUMBER_PARAMETER,
                                "quantity": {
                                    "type": "integer",
                                    "minimum": 1,
                                    "default": 1
                                }
                            },
                            "required": ["articleNumber"]
                        }
                    }
                },
                "required": ["username", "positions"]
            }
        }
    }


async def execute_add_multiple_articles_to_cart(
    username: Any,
    positions: Any,
    store: Optional[CartStore] = None
) -> ToolResult:
    """
    Execute adding several articles to the cart.

    Positions without an article number are skipped; the remaining ones
    are applied in order as one update.

    Args:
        username: User the cart belongs to
        positions: List of {"articleNumber", "quantity"} objects
        store: Optional cart store (defaults to the global one)

    Returns:
        Tool result
    """
    store = store or cart_store
    try:
        username = validate_username(username)
    except CartValidationError as e:
        return error_result(str(e))

    if not positions or not isinstance(positions, list):
        return error_result("Missing or empty positions array.")

    lines: List[CartLine] = []
    try:
        for position in positions:
            if not isinstance(position, dict):
                continue
            raw_article_number = position.get("articleNumber")
            if not isinstance(raw_article_number, str) or not raw_article_number.strip():
                continue
            quantity = position.get("quantity")
            lines.append(CartLine(
                article_number=raw_article_number.strip(),
                quantity=validate_quantity(1 if quantity is None else quantity)
            ))
    except CartValidationError as e:
        return error_result(str(e))

    if not lines:
        return error_result("No valid positions provided. Each position must have an articleNumber.")

    cart = store.add_lines(username, lines)
    added_items = ", ".join(f"{line.quantity}x {line.article_number}" for line in lines)
    return ToolResult(
        text=(
            f'Added {len(lines)} position(s) to cart for user "{username}": {added_items}. '
            f"Cart now contains {len(cart.positions)} position(s)."
        ),
        structured_content={"cart": {**cart.to_dict(), "username": username}}
    )


def get_get_cart_function() -> Dict[str, Any]:
    """
    Get OpenAI function definition for viewing the cart.

    Returns:
        OpenAI function definition
    """
    return {
        "type": "function",
        "function": {
            "name": "get_cart",
            "description": "Retrieves the current shopping cart for a specific user, including all positions with article numbers, quantities, descriptions and prices.",
            "parameters": {
                "type": "object",
                "properties": {
                    "username": USERNAME_PARAMETER
                },
                "required": ["username"]
            }
        }
    }


async def execute_get_cart(
    username: Any,
    store: Optional[CartStore] = None,
    enrichment: Optional[CartEnrichmentService] = None
) -> ToolResult:
    """
    Execute viewing the cart with live catalog details.

    Args:
        username: User the cart belongs to
        store: Optional cart store (defaults to the global one)
        enrichment: Optional enrichment service (defaults to the shared one)

    Returns:
        Tool result with the enriched cart
    """
    try:
        username = validate_username(username)
    except CartValidationError as e:
        return error_result(str(e))

    enrichment = enrichment or get_enrichment_service()
    cart = await enrichment.enrich_user_cart(username, store=store or cart_store)
    structured = {"cart": {**cart.to_dict(), "username": username}}

    if not cart.positions:
        return ToolResult(text=f'Cart for user "{username}" is empty.', structured_content=structured)

    lines = [
        f'Cart for user "{username}" contains {len(cart.positions)} position(s) '
        f"with {cart.total_positions} total item(s):"
    ]
    for position in cart.positions:
        if position.degraded:
            lines.append(f"- {position.quantity}x {position.article_number} (details unavailable)")
        else:
            lines.append(
                f"- {position.quantity}x {position.article_number} {position.description} "
                f"@ CHF {position.price:.2f}"
            )
    return ToolResult(text="\n".join(lines), structured_content=structured)


def get_update_cart_position_function() -> Dict[str, Any]:
    """
    Get OpenAI function definition for setting a position's quantity.

    Returns:
        OpenAI function definition
    """
    return {
        "type": "function",
        "function": {
            "name": "update_cart_position",
            "description": "Sets the quantity of an article in the cart to the given value (replaces, does not add). Adds the article if it is not in the cart yet.",
            "parameters": {
                "type": "object",
                "properties": {
                    "username": USERNAME_PARAMETER,
                    "articleNumber": ARTICLE_NUMBER_PARAMETER,
                    "quantity": {
                        "type": "integer",
                        "description": "The new quantity (must be greater than 0)",
                        "minimum": 1
                    }
                },
                "required": ["username", "articleNumber", "quantity"]
            }
        }
    }


async def execute_update_cart_position(
    username: Any,
    article_number: Any,
    quantity: Any,
    store: Optional[CartStore] = None
) -> ToolResult:
    """
    Execute replacing a position's quantity.

    Args:
        username: User the cart belongs to
        article_number: Article number to update
        quantity: New quantity
        store: Optional cart store (defaults to the global one)

    Returns:
        Tool result
    """
    store = store or cart_store
    try:
        username = validate_username(username)
        article_number = validate_article_number(article_number)
    except CartValidationError as e:
        return error_result(str(e))
    try:
        quantity = validate_quantity(quantity)
    except CartValidationError as e:
        return error_result(f"{e} Use remove_article_from_cart to remove items.")

    cart = store.set_line_quantity(username, article_number, quantity)
    return ToolResult(
        text=f'Updated article {article_number} quantity to {quantity} for user "{username}".',
        structured_content={"cart": {**cart.to_dict(), "username": username}}
    )


def get_remove_article_from_cart_function() -> Dict[str, Any]:
    """
    Get OpenAI function definition for removing an article from the cart.

    Returns:
        OpenAI function definition
    """
    return {
        "type": "function",
        "function": {
            "name": "remove_article_from_cart",
            "description": "Completely removes an article from the cart. Removing an article that is not in the cart does nothing.",
            "parameters": {
                "type": "object",
                "properties": {
                    "username": USERNAME_PARAMETER,
                    "articleNumber": ARTICLE_NUMBER_PARAMETER
                },
                "required": ["username", "articleNumber"]
            }
        }
    }


async def execute_remove_article_from_cart(
    username: Any,
    article_number: Any,
    store: Optional[CartStore] = None
) -> ToolResult:
    """
    Execute removing an article from the cart.

    Args:
        username: User the cart belongs to
        article_number: Article number to remove
        store: Optional cart store (defaults to the global one)

    Returns:
        Tool result
    """
    store = store or cart_store
    try:
        username = validate_username(username)
        article_number = validate_article_number(article_number)
    except CartValidationError as e:
        return error_result(str(e))

    was_present = store.get_cart(username).find(article_number) is not None
    cart = store.remove_line(username, article_number)
    if was_present:
        message = f'Removed article {article_number} from cart for user "{username}".'
    else:
        message = f'Article {article_number} was not in the cart for user "{username}".'
    return ToolResult(
        text=message,
        structured_content={"cart": {**cart.to_dict(), "username": username}}
    )


def get_clear_cart_function() -> Dict[str, Any]:
    """
    Get OpenAI function definition for emptying the cart.

    Returns:
        OpenAI function definition
    """
    return {
        "type": "function",
        "function": {
            "name": "clear_cart",
            "description": "Removes all articles from the cart of a specific user.",
            "parameters": {
                "type": "object",
                "properties": {
                    "username": USERNAME_PARAMETER
                },
                "required": ["username"]
            }
        }
    }


async def execute_clear_cart(username: Any, store: Optional[CartStore] = None) -> ToolResult:
    """Execute emptying the cart."""
    store = store or cart_store
    try:
        username = validate_username(username)
    except CartValidationError as e:
        return error_result(str(e))

    cart = store.clear_cart(username)
    return ToolResult(
        text=f'Cleared cart for user "{username}".',
        structured_content={"cart": {**cart.to_dict(), "username": username}}
    )


def get_submit_cart_function() -> Dict[str, Any]:
    """
    Get OpenAI function definition for submitting the cart.

    Returns:
        OpenAI function definition
    """
    return {
        "type": "function",
        "function": {
            "name": "submit_cart",
            "description": "Submits the shopping cart for a specific user and returns an order ID. The cart will be cleared after submission.",
            "parameters": {
                "type": "object",
                "properties": {
                    "username": USERNAME_PARAMETER
                },
                "required": ["username"]
            }
        }
    }


async def execute_submit_cart(username: Any, orders: Optional[OrderService] = None) -> ToolResult:
    """
    Execute submitting the cart.

    Args:
        username: User the cart belongs to
        orders: Optional order service (defaults to the global one)

    Returns:
        Tool result with the order id
    """
    orders = orders or order_service
    try:
        username = validate_username(username)
    except CartValidationError as e:
        return error_result(str(e))

    order_id = orders.submit_cart(username)
    return ToolResult(
        text=f'Cart submitted successfully for user "{username}". Order ID: {order_id}.',
        structured_content={"orderId": order_id, "username": username}
    )
