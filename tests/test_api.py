"""
Tests for the HTTP API
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from webshop.catalog.client import CatalogArticle, CatalogClient, CatalogSearchError
from webshop.main import app
from webshop.routes.deps import get_cart_store, get_catalog, get_enrichment, get_orders
from webshop.utils.cart import CartLine
from webshop.utils.enrichment import CartEnrichmentService
from webshop.utils.orders import OrderService


class FakeSearchCatalog:
    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error
        self.terms = []

    async def search_catalog(self, term):
        self.terms.append(term)
        if self.error:
            raise self.error
        return self.results


@pytest.fixture
def search_catalog():
    return FakeSearchCatalog([
        CatalogArticle("095210", "Butter <250g>", 3.2, "https://catalog.test/images/articles/120px/095210.jpg")
    ])


@pytest.fixture
def client(store, enrichment, search_catalog):
    app.dependency_overrides[get_cart_store] = lambda: store
    app.dependency_overrides[get_enrichment] = lambda: enrichment
    app.dependency_overrides[get_orders] = lambda: OrderService(store=store, id_factory=lambda: "order-42")
    app.dependency_overrides[get_catalog] = lambda: search_catalog
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Webshop Cart API"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_add_position_accumulates(client, store):
    client.post("/user/cart/alice/positions", json={"articleNumber": "095210", "quantity": 1})
    response = client.post("/user/cart/alice/positions", json={"articleNumber": "095210", "quantity": 2})

    assert response.status_code == 200
    assert response.json() == {
        "username": "alice",
        "positions": [{"articleNumber": "095210", "quantity": 3}],
        "itemCount": 3,
    }


def test_add_position_default_quantity(client, store):
    client.post("/user/cart/alice/positions", json={"articleNumber": "A"})

    assert store.item_count("alice") == 1


@pytest.mark.parametrize("body", [
    {"articleNumber": "", "quantity": 1},
    {"articleNumber": "A", "quantity": 0},
    {"articleNumber": "A", "quantity": -1},
    {"quantity": 1},
])
def test_add_position_validation(client, store, body):
    response = client.post("/user/cart/alice/positions", json=body)

    assert response.status_code == 422
    assert store.has_cart("alice") is False


def test_add_positions_batch(client):
    response = client.post("/user/cart/bob/positions/batch", json={"positions": [
        {"articleNumber": "A", "quantity": 1},
        {"articleNumber": "B", "quantity": 2},
        {"articleNumber": "A", "quantity": 3},
    ]})

    assert response.json()["positions"] == [
        {"articleNumber": "A", "quantity": 4},
        {"articleNumber": "B", "quantity": 2},
    ]
    assert response.json()["itemCount"] == 6


def test_add_positions_batch_requires_positions(client):
    assert client.post("/user/cart/bob/positions/batch", json={"positions": []}).status_code == 422


def test_update_position_replaces(client, store):
    store.add_line("u", "A", 2)

    response = client.put("/user/cart/u/positions/A", json={"quantity": 5})

    assert response.json()["positions"] == [{"articleNumber": "A", "quantity": 5}]


def test_update_position_rejects_zero(client, store):
    store.add_line("u", "A", 2)

    assert client.put("/user/cart/u/positions/A", json={"quantity": 0}).status_code == 422
    assert store.item_count("u") == 2


def test_remove_position_is_idempotent(client, store):
    store.add_lines("u", [CartLine("A", 1), CartLine("B", 1)])

    first = client.delete("/user/cart/u/positions/A")
    second = client.delete("/user/cart/u/positions/A")

    assert first.json() == second.json()
    assert first.json()["positions"] == [{"articleNumber": "B", "quantity": 1}]


def test_clear_cart(client, store):
    store.add_line("u", "A", 3)

    response = client.delete("/user/cart/u")

    assert response.json()["positions"] == []
    assert client.get("/user/cart/u/count").json() == {"username": "u", "itemCount": 0}


def test_get_cart_enriched(client, store):
    store.add_lines("alice", [CartLine("B", 1), CartLine("X", 2), CartLine("A", 3)])

    response = client.get("/user/cart/alice")

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "alice"
    assert data["totalPositions"] == 6
    assert [p["articleNumber"] for p in data["positions"]] == ["B", "X", "A"]
    degraded = data["positions"][1]
    assert degraded == {
        "articleNumber": "X",
        "quantity": 2,
        "description": "",
        "price": 0.0,
        "imageUrl": "https://catalog.test/images/articles/120px/X.jpg",
    }
    assert data["positions"][0]["description"] == "Article B"


def test_get_unknown_cart_is_empty(client, store):
    response = client.get("/user/cart/nobody")

    assert response.json() == {"username": "nobody", "positions": [], "totalPositions": 0}
    assert store.has_cart("nobody") is False


def test_item_count(client, store):
    store.add_lines("alice", [CartLine("A", 2), CartLine("B", 5)])

    assert client.get("/user/cart/alice/count").json()["itemCount"] == 7


def test_submit_cart(client, store):
    store.add_line("alice", "A", 2)

    response = client.post("/user/cart/alice/submit")

    assert response.status_code == 201
    assert response.json() == {"username": "alice", "orderId": "order-42"}
    assert store.get_cart("alice").positions == []


def test_get_cart_html(client, store):
    store.add_lines("alice", [CartLine("A", 2), CartLine("X", 1)])

    response = client.get("/user/cart/alice/html")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Article A" in response.text
    assert "Details unavailable" in response.text


def test_search_catalog(client):
    response = client.get("/user/catalog/search", params={"term": "butter"})

    assert response.status_code == 200
    assert response.json() == [{
        "articleNumber": "095210",
        "description": "Butter <250g>",
        "normalPrice": 3.2,
        "articleImageUrl": "https://catalog.test/images/articles/120px/095210.jpg",
    }]


def test_search_catalog_requires_term(client):
    assert client.get("/user/catalog/search").status_code == 422


def test_search_catalog_failure(client):
    app.dependency_overrides[get_catalog] = lambda: FakeSearchCatalog(error=CatalogSearchError("down"))

    response = client.get("/user/catalog/search", params={"term": "butter"})

    assert response.status_code == 502


def test_search_catalog_html_escapes(client):
    response = client.get("/user/catalog/search/html", params={"term": "<b>butter</b>"})

    assert response.status_code == 200
    assert "Butter &lt;250g&gt;" in response.text
    assert "<b>butter</b>" not in response.text


def test_list_tools(client):
    response = client.get("/tools")

    assert response.status_code == 200
    names = [tool["function"]["name"] for tool in response.json()]
    assert "add_article_to_cart" in names
    assert "submit_cart" in names


def test_call_tool(client):
    response = client.post("/tools/add_article_to_cart", json={"username": "carol", "articleNumber": "A"})

    assert response.status_code == 200
    data = response.json()
    assert data["isError"] is False
    assert data["content"][0]["text"].startswith("Added 1 of article A")
    assert data["structuredContent"]["cart"]["positions"] == [{"articleNumber": "A", "quantity": 1}]


def test_call_tool_invalid_arguments(client):
    response = client.post("/tools/add_article_to_cart", json={"username": "carol", "articleNumber": "A", "quantity": 0})

    assert response.status_code == 200
    assert response.json()["isError"] is True


def test_call_unknown_tool(client):
    assert client.post("/tools/calculate", json={}).status_code == 404


def test_get_cart_degrades_malformed_catalog_payloads(client, store):
    payloads = {
        "A": {"description": "Article A", "normalPrice": 1.5},
        "BAD_DESC": {"description": 123, "normalPrice": 1.5},
        "NAN": {"description": "Broken", "normalPrice": float("nan")},
        "INF": {"description": "Broken", "normalPrice": "Infinity"},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        article_number = request.url.path.rsplit("/", 1)[-1]
        return httpx.Response(200, content=json.dumps(payloads[article_number]))

    catalog = CatalogClient(
        base_url="https://catalog.test",
        image_base_url="https://catalog.test",
        transport=httpx.MockTransport(handler)
    )
    app.dependency_overrides[get_enrichment] = lambda: CartEnrichmentService(catalog=catalog)
    store.add_lines("alice", [CartLine(number, 1) for number in payloads])

    response = client.get("/user/cart/alice")
    html = client.get("/user/cart/alice/html")

    assert response.status_code == 200
    positions = response.json()["positions"]
    assert positions[0]["price"] == 1.5
    for position in positions[1:]:
        assert position["description"] == ""
        assert position["price"] == 0.0
    assert response.json()["totalPositions"] == 4
    assert html.status_code == 200
    assert html.text.count("Details unavailable") == 3


@pytest.mark.parametrize("path", ["/user/catalog/search", "/user/catalog/search/html"])
def test_search_catalog_rejects_blank_term(client, search_catalog, path):
    response = client.get(path, params={"term": "   "})

    assert response.status_code == 422
    assert search_catalog.terms == []


def test_search_catalog_strips_term(client, search_catalog):
    client.get("/user/catalog/search", params={"term": "  butter "})

    assert search_catalog.terms == ["butter"]
