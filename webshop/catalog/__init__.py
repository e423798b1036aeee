"""Catalog access."""
from .client import (
    ArticleDetails,
    CatalogArticle,
    CatalogClient,
    CatalogLookupError,
    CatalogSearchError,
    build_image_url,
    close_catalog_client,
    get_catalog_client
)

__all__ = [
    "ArticleDetails",
    "CatalogArticle",
    "CatalogClient",
    "CatalogLookupError",
    "CatalogSearchError",
    "build_image_url",
    "close_catalog_client",
    "get_catalog_client"
]
