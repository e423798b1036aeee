"""Pytest configuration and fixtures"""
import asyncio
import os
from typing import Dict, Optional, Union

import pytest

# Keep tests away from a developer's .env catalog settings
os.environ.setdefault("CATALOG_BASE_URL", "https://catalog.test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from webshop.catalog.client import ArticleDetails, CatalogLookupError, build_image_url
from webshop.utils.cart import CartStore, InMemoryCartStorage, cart_store
from webshop.utils.enrichment import CartEnrichmentService


class FakeCatalog:
    """In-memory catalog with per-article delays and failures."""

    def __init__(
        self,
        articles: Optional[Dict[str, Union[ArticleDetails, Exception]]] = None,
        delays: Optional[Dict[str, float]] = None
    ):
        self.articles = articles or {}
        self.delays = delays or {}
        self.calls = []
        self.completed = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_article_details(self, article_number: str) -> ArticleDetails:
        self.calls.append(article_number)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(article_number, 0))
            result = self.articles.get(article_number)
            if result is None:
                raise CatalogLookupError(f"API request failed: {article_number} - 404")
            if isinstance(result, Exception):
                raise result
            return result
        finally:
            self.in_flight -= 1
            self.completed.append(article_number)

    def image_url(self, article_number: str) -> str:
        return build_image_url(article_number, "https://catalog.test")


def make_details(article_number: str, description: str, price: float) -> ArticleDetails:
    return ArticleDetails(article_number=article_number, description=description, normal_price=price)


@pytest.fixture(autouse=True)
def reset_global_cart_store(monkeypatch):
    """Give every test an empty process-wide cart store."""
    monkeypatch.setattr(cart_store, "_storage", InMemoryCartStorage())
    yield


@pytest.fixture
def store():
    """Fresh, isolated cart store"""
    return CartStore()


@pytest.fixture
def catalog():
    """Catalog knowing three articles"""
    return FakeCatalog({
        "095210": make_details("095210", "Butter 250g", 3.2),
        "022600": make_details("022600", "Cream 1l", 5.9),
        "A": make_details("A", "Article A", 1.0),
        "B": make_details("B", "Article B", 2.0),
        "C": make_details("C", "Article C", 3.0),
    })


@pytest.fixture
def enrichment(catalog):
    return CartEnrichmentService(catalog=catalog, concurrency=4)
