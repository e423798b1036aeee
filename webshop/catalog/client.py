"""HTTP client for the webshop catalog (article details and search)."""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from webshop.config import settings
from webshop.utils.logging import get_logger, sanitize_for_logging

logger = get_logger(__name__)

ARTICLE_DETAILS_PATH = "/api/webshop/hub/bgh/articledetails/{article_number}"
SEARCH_PATH = "/api/webshop/hub/search-articles/search"
IMAGE_PATH = "/images/articles/120px/{article_number}.jpg"


class CatalogLookupError(LookupError):
    """Raised when article details cannot be fetched or parsed."""


class CatalogSearchError(Exception):
    """Raised when a catalog search fails."""


@dataclass
class ArticleDetails:
    """Live article data returned by the details endpoint."""
    article_number: str
    description: str
    normal_price: float


@dataclass
class CatalogArticle:
    """Single catalog search hit."""
    article_number: str
    description: str
    normal_price: float
    image_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "articleNumber": self.article_number,
            "description": self.description,
            "normalPrice": self.normal_price,
            "articleImageUrl": self.image_url,
        }


def build_image_url(article_number: str, image_base_url: Optional[str] = None) -> str:
    """
    Build the catalog image URL for an article. The URL is not validated.

    Args:
        article_number: Article number
        image_base_url: Image host (defaults to the configured one)

    Returns:
        Absolute image URL
    """
    base = (image_base_url or settings.image_base_url).rstrip("/")
    return base + IMAGE_PATH.format(article_number=article_number)


def _to_price(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"invalid price: {value!r}")
    price = float(value)
    if not math.isfinite(price):
        raise ValueError(f"invalid price: {value!r}")
    return price


def _to_description(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"invalid description: {value!r}")
    return value


class CatalogClient:
    """
    Async client for the catalog hub API.

    The underlying ``httpx.AsyncClient`` is created lazily and shared by
    all requests made through this instance.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        image_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        search_page_size: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.catalog_base_url).rstrip("/")
        self.image_base_url = (image_base_url or settings.image_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.catalog_timeout
        self.search_page_size = search_page_size or settings.catalog_search_page_size
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._http_client

    async def aclose(self) -> None:
        """Close the shared HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def image_url(self, article_number: str) -> str:
        return build_image_url(article_number, self.image_base_url)

    async def fetch_article_details(self, article_number: str) -> ArticleDetails:
        """
        Fetch live details for one article.

        Args:
            article_number: Article number to look up

        Returns:
            Article details

        Raises:
            CatalogLookupError: On transport failure, non-success status or
                a malformed payload
        """
        path = ARTICLE_DETAILS_PATH.format(article_number=article_number)
        logger.debug("Fetching article details: %s", sanitize_for_logging(path, max_length=120))
        client = self._get_http_client()
        try:
            response = await client.get(path, headers={"Accept": "application/json, text/plain, */*"})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise CatalogLookupError(
                f"Article details request failed for {article_number}: {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise CatalogLookupError(f"Article details request failed for {article_number}: {e}") from e
        except ValueError as e:
            raise CatalogLookupError(f"Invalid article details payload for {article_number}") from e

        if not isinstance(data, dict) or not data:
            raise CatalogLookupError(f"Article data not found in response for {article_number}")
        try:
            price = _to_price(data.get("normalPrice"))
            description = _to_description(data.get("description"))
        except ValueError as e:
            raise CatalogLookupError(f"Invalid article details for {article_number}: {e}") from e

        return ArticleDetails(
            article_number=str(data.get("articleNumber") or article_number),
            description=description,
            normal_price=price,
        )

    async def search_catalog(self, search_term: str) -> List[CatalogArticle]:
        """
        Search the catalog by free text.

        Args:
            search_term: Term to search for

        Returns:
            Matching articles (first page only)

        Raises:
            CatalogSearchError: If the request or payload is invalid
        """
        client = self._get_http_client()
        try:
            response = await client.post(
                SEARCH_PATH,
                json={"searchTerm": search_term, "page": 0, "pageSize": self.search_page_size},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Catalog search failed with status %s", e.response.status_code)
            raise CatalogSearchError(f"Search request failed: {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Catalog search failed: %s", e)
            raise CatalogSearchError(f"Search request failed: {e}") from e

        articles = data.get("articles") if isinstance(data, dict) else None
        results = []
        for article in articles or []:
            # The API pads result pages with empty objects
            if not isinstance(article, dict) or not article:
                continue
            article_number = str(article.get("articleNumber", ""))
            try:
                price = _to_price(article.get("normalPrice", 0))
            except ValueError:
                price = 0.0
            try:
                description = _to_description(article.get("description"))
            except ValueError:
                description = ""
            results.append(CatalogArticle(
                article_number=article_number,
                description=description,
                normal_price=price,
                image_url=self.image_url(article_number),
            ))
        return results


_catalog_client: Optional[CatalogClient] = None


def get_catalog_client() -> CatalogClient:
    """Get the process-wide catalog client."""
    global _catalog_client
    if _catalog_client is None:
        _catalog_client = CatalogClient()
    return _catalog_client


async def close_catalog_client() -> None:
    """Close and drop the process-wide catalog client."""
    global _catalog_client
    if _catalog_client is not None:
        await _catalog_client.aclose()
        _catalog_client = None
