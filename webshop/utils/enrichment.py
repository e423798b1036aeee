"""Merge stored cart lines with live catalog data for display."""
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from webshop.catalog.client import ArticleDetails, get_catalog_client
from webshop.config import settings
from webshop.utils.cart import Cart, CartLine, CartStore, cart_store
from webshop.utils.logging import get_logger, sanitize_for_logging

logger = get_logger(__name__)


class ArticleCatalog(Protocol):
    """What enrichment needs from the catalog."""

    async def fetch_article_details(self, article_number: str) -> ArticleDetails: ...

    def image_url(self, article_number: str) -> str: ...


@dataclass
class CartLineDisplay:
    """Display-ready cart line. Zero price and empty description mean details are unavailable."""
    article_number: str
    quantity: int
    description: str
    price: float
    image_url: str

    @property
    def degraded(self) -> bool:
        return self.price == 0 and self.description == ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "articleNumber": self.article_number,
            "quantity": self.quantity,
            "description": self.description,
            "price": self.price,
            "imageUrl": self.image_url,
        }


@dataclass
class CartDisplay:
    """Enriched cart with the total number of items."""
    positions: List[CartLineDisplay]
    total_positions: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "positions": [line.to_dict() for line in self.positions],
            "totalPositions": self.total_positions,
        }


@dataclass
class LineResolution:
    """Outcome of one lookup: either details or the error that replaced them."""
    line: CartLine
    details: Optional[ArticleDetails] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.details is not None


class CartEnrichmentService:
    """
    Resolves cart lines against the catalog.

    A failed lookup never fails the whole read: the line is kept with an
    empty description and a zero price.
    """

    def __init__(self, catalog: Optional[ArticleCatalog] = None, concurrency: Optional[int] = None):
        """
        Args:
            catalog: Catalog implementation (defaults to the shared HTTP client)
            concurrency: Max lookups in flight per cart
        """
        self._catalog = catalog
        if concurrency is None:
            concurrency = settings.enrichment_concurrency
        self.concurrency = max(1, concurrency)

    @property
    def catalog(self) -> ArticleCatalog:
        if self._catalog is None:
            self._catalog = get_catalog_client()
        return self._catalog

    async def _resolve(self, line: CartLine, semaphore: asyncio.Semaphore) -> LineResolution:
        async with semaphore:
            try:
                details = await self.catalog.fetch_article_details(line.article_number)
            except Exception as e:
                logger.warning(
                    "Error fetching product details for %s: %s",
                    sanitize_for_logging(line.article_number),
                    e,
                )
                return LineResolution(line=line, error=e)
        return LineResolution(line=line, details=details)

    def _to_display(self, resolution: LineResolution) -> CartLineDisplay:
        line = resolution.line
        if resolution.ok:
            description = resolution.details.description or ""
            price = resolution.details.normal_price
        else:
            description = ""
            price = 0.0
        return CartLineDisplay(
            article_number=line.article_number,
            quantity=line.quantity,
            description=description,
            price=price,
            image_url=self.catalog.image_url(line.article_number),
        )

    async def enrich(self, cart: Cart) -> CartDisplay:
        """
        Build the display view of a cart.

        Args:
            cart: Raw cart (a snapshot; it is not re-read during lookups)

        Returns:
            Display cart with positions in the cart's order
        """
        semaphore = asyncio.Semaphore(self.concurrency)
        # gather keeps input order regardless of completion order
        resolutions = await asyncio.gather(
            *(self._resolve(line, semaphore) for line in cart.positions)
        )
        positions = [self._to_display(resolution) for resolution in resolutions]
        failed = sum(1 for resolution in resolutions if not resolution.ok)
        if failed:
            logger.info("Enriched cart with %d of %d line(s) degraded", failed, len(resolutions))
        return CartDisplay(
            positions=positions,
            total_positions=sum(line.quantity for line in positions),
        )

    async def enrich_user_cart(self, username: str, store: Optional[CartStore] = None) -> CartDisplay:
        """Read a user's cart from the store and enrich it."""
        cart = (store or cart_store).get_cart(username)
        return await self.enrich(cart)


_enrichment_service: Optional[CartEnrichmentService] = None


def get_enrichment_service() -> CartEnrichmentService:
    """Get the process-wide enrichment service."""
    global _enrichment_service
    if _enrichment_service is None:
        _enrichment_service = CartEnrichmentService()
    return _enrichment_service
