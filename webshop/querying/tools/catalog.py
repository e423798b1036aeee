"""Catalog search tool using OpenAI function calling."""
from typing import Any, Dict, Optional

from webshop.catalog.client import CatalogClient, CatalogSearchError, get_catalog_client
from webshop.utils.logging import get_logger, sanitize_for_logging
from .base import ToolResult

logger = get_logger(__name__)


def get_search_catalog_function() -> Dict[str, Any]:
    """
    Get OpenAI function definition for catalog search.

    Returns:
        OpenAI function definition
    """
    return {
        "type": "function",
        "function": {
            "name": "search_catalog",
            "description": "Searches the catalog for products by search term and returns matching products with article numbers, descriptions, and prices. You can only search for one product at a time!",
            "parameters": {
                "type": "object",
                "properties": {
                    "searchTerm": {
                        "type": "string",
                        "description": "The product to search for",
                        "minLength": 1
                    }
                },
                "required": ["searchTerm"]
            }
        }
    }


async def execute_search_catalog(search_term: Any, catalog: Optional[CatalogClient] = None) -> ToolResult:
    """
    Execute a catalog search.

    Args:
        search_term: Term to search for
        catalog: Optional catalog client (defaults to the shared one)

    Returns:
        Tool result with the found products
    """
    term = search_term.strip() if isinstance(search_term, str) else ""
    if not term:
        return ToolResult(
            text="Missing search term.",
            structured_content={"products": [], "searchTerm": ""},
            is_error=True
        )

    catalog = catalog or get_catalog_client()
    try:
        products = await catalog.search_catalog(term)
    except CatalogSearchError as e:
        return ToolResult(
            text=f"Error searching catalog: {e}",
            structured_content={"products": [], "searchTerm": term},
            is_error=True
        )

    logger.info("Catalog search for %s returned %d product(s)", sanitize_for_logging(term), len(products))
    if products:
        message = f'Found {len(products)} product(s) for "{term}".'
    else:
        message = f'No products found for "{term}".'
    return ToolResult(
        text=message,
        structured_content={
            "products": [product.to_dict() for product in products],
            "searchTerm": term
        }
    )
