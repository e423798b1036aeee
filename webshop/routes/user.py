"""User routes for the cart and the catalog."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from webshop.catalog.client import CatalogClient, CatalogSearchError
from webshop.utils.cart import Cart, CartLine, CartStore
from webshop.utils.enrichment import CartDisplay, CartEnrichmentService
from webshop.utils.html import generate_cart_html, generate_products_html
from webshop.utils.orders import OrderService
from .deps import get_cart_store, get_catalog, get_enrichment, get_orders

router = APIRouter(prefix="/user", tags=["user"])


class CamelModel(BaseModel):
    """Base model exposing camelCase JSON field names."""
    model_config = ConfigDict(populate_by_name=True)


# Request models
class AddPositionRequest(CamelModel):
    """Request model for adding one article."""
    article_number: str = Field(..., alias="articleNumber", min_length=1, description="Catalog article number")
    quantity: int = Field(default=1, gt=0, description="Quantity to add")


class AddPositionsRequest(CamelModel):
    """Request model for adding several articles at once."""
    positions: List[AddPositionRequest] = Field(..., min_length=1, description="Positions to add, applied in order")


class UpdateQuantityRequest(CamelModel):
    """Request model for replacing a position's quantity."""
    quantity: int = Field(..., gt=0, description="New quantity")


# Response models
class CartPositionResponse(CamelModel):
    """Stored cart position."""
    article_number: str = Field(..., alias="articleNumber")
    quantity: int


class CartResponse(CamelModel):
    """Stored (not enriched) cart."""
    username: str
    positions: List[CartPositionResponse]
    item_count: int = Field(..., alias="itemCount")


class CartPositionDisplayResponse(CamelModel):
    """Cart position with live catalog details."""
    article_number: str = Field(..., alias="articleNumber")
    quantity: int
    description: str = Field(..., description="Empty when catalog details are unavailable")
    price: float = Field(..., description="Zero when catalog details are unavailable")
    image_url: str = Field(..., alias="imageUrl")


class CartDisplayResponse(CamelModel):
    """Enriched cart."""
    username: str
    positions: List[CartPositionDisplayResponse]
    total_positions: int = Field(..., alias="totalPositions")


class ItemCountResponse(CamelModel):
    username: str
    item_count: int = Field(..., alias="itemCount")


class SubmitResponse(CamelModel):
    username: str
    order_id: str = Field(..., alias="orderId")


class CatalogArticleResponse(CamelModel):
    """Catalog search hit."""
    article_number: str = Field(..., alias="articleNumber")
    description: str
    normal_price: float = Field(..., alias="normalPrice")
    image_url: str = Field(..., alias="articleImageUrl")


def _cart_response(username: str, cart: Cart) -> CartResponse:
    return CartResponse(
        username=username,
        positions=[
            CartPositionResponse(article_number=line.article_number, quantity=line.quantity)
            for line in cart.positions
        ],
        item_count=cart.item_count
    )


def _display_response(username: str, cart: CartDisplay) -> CartDisplayResponse:
    return CartDisplayResponse(
        username=username,
        positions=[
            CartPositionDisplayResponse(
                article_number=line.article_number,
                quantity=line.quantity,
                description=line.description,
                price=line.price,
                image_url=line.image_url
            )
            for line in cart.positions
        ],
        total_positions=cart.total_positions
    )


# Cart endpoints
@router.get(
    "/cart/{username}",
    response_model=CartDisplayResponse,
    summary="Get user's cart with catalog details"
)
async def get_cart(
    username: str,
    store: CartStore = Depends(get_cart_store),
    enrichment: CartEnrichmentService = Depends(get_enrichment)
):
    """
    Get the user's cart with live description, price and image per position.

    Positions whose catalog lookup fails are still returned, with an empty
    description and a zero price. The read itself never fails because of
    the catalog.
    """
    cart = await enrichment.enrich_user_cart(username, store=store)
    return _display_response(username, cart)


@router.get("/cart/{username}/html", response_class=HTMLResponse, summary="Render user's cart as HTML")
async def get_cart_html(
    username: str,
    store: CartStore = Depends(get_cart_store),
    enrichment: CartEnrichmentService = Depends(get_enrichment)
):
    cart = await enrichment.enrich_user_cart(username, store=store)
    return HTMLResponse(generate_cart_html(cart, username))


@router.get(
    "/cart/{username}/count",
    response_model=ItemCountResponse,
    summary="Get number of items in cart"
)
def get_item_count(username: str, store: CartStore = Depends(get_cart_store)):
    return ItemCountResponse(username=username, item_count=store.item_count(username))


@router.post(
    "/cart/{username}/positions",
    response_model=CartResponse,
    summary="Add an article to the cart"
)
def add_position(username: str, request: AddPositionRequest, store: CartStore = Depends(get_cart_store)):
    """Add an article; an existing position's quantity is increased."""
    cart = store.add_line(username, request.article_number, request.quantity)
    return _cart_response(username, cart)


@router.post(
    "/cart/{username}/positions/batch",
    response_model=CartResponse,
    summary="Add several articles to the cart"
)
def add_positions(username: str, request: AddPositionsRequest, store: CartStore = Depends(get_cart_store)):
    lines = [CartLine(article_number=p.article_number, quantity=p.quantity) for p in request.positions]
    cart = store.add_lines(username, lines)
    return _cart_response(username, cart)


@router.put(
    "/cart/{username}/positions/{article_number}",
    response_model=CartResponse,
    summary="Set the quantity of a cart position"
)
def update_position(
    username: str,
    article_number: str,
    request: UpdateQuantityRequest,
    store: CartStore = Depends(get_cart_store)
):
    """Replace the quantity of a position, creating it if absent."""
    cart = store.set_line_quantity(username, article_number, request.quantity)
    return _cart_response(username, cart)


@router.delete(
    "/cart/{username}/positions/{article_number}",
    response_model=CartResponse,
    summary="Remove an article from the cart"
)
def remove_position(username: str, article_number: str, store: CartStore = Depends(get_cart_store)):
    cart = store.remove_line(username, article_number)
    return _cart_response(username, cart)


@router.delete(
    "/cart/{username}",
    response_model=CartResponse,
    summary="Clear the cart"
)
def clear_cart(username: str, store: CartStore = Depends(get_cart_store)):
    cart = store.clear_cart(username)
    return _cart_response(username, cart)


@router.post(
    "/cart/{username}/submit",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit the cart as an order"
)
def submit_cart(username: str, orders: OrderService = Depends(get_orders)):
    """
    Submit the user's cart.

    Returns a new order id and empties the cart.
    """
    order_id = orders.submit_cart(username)
    return SubmitResponse(username=username, order_id=order_id)


# Catalog endpoints
def search_term(term: str = Query(..., min_length=1, description="Search term")) -> str:
    """Trimmed search term; blank terms are rejected like missing ones."""
    term = term.strip()
    if not term:
        raise HTTPException(status_code=422, detail="Missing search term.")
    return term


@router.get(
    "/catalog/search",
    response_model=List[CatalogArticleResponse],
    summary="Search the catalog"
)
async def search_catalog(
    term: str = Depends(search_term),
    catalog: CatalogClient = Depends(get_catalog)
):
    try:
        products = await catalog.search_catalog(term)
    except CatalogSearchError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Error searching catalog: {str(e)}"
        )
    return [
        CatalogArticleResponse(
            article_number=product.article_number,
            description=product.description,
            normal_price=product.normal_price,
            image_url=product.image_url
        )
        for product in products
    ]


@router.get("/catalog/search/html", response_class=HTMLResponse, summary="Render catalog search results as HTML")
async def search_catalog_html(
    term: str = Depends(search_term),
    catalog: CatalogClient = Depends(get_catalog)
):
    try:
        products = await catalog.search_catalog(term)
    except CatalogSearchError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Error searching catalog: {str(e)}"
        )
    return HTMLResponse(generate_products_html(products, term))
