"""FastAPI dependencies shared by the routers."""
from webshop.catalog.client import CatalogClient, get_catalog_client
from webshop.utils.cart import CartStore, cart_store
from webshop.utils.enrichment import CartEnrichmentService, get_enrichment_service
from webshop.utils.orders import OrderService, order_service


def get_cart_store() -> CartStore:
    return cart_store


def get_enrichment() -> CartEnrichmentService:
    return get_enrichment_service()


def get_orders() -> OrderService:
    return order_service


def get_catalog() -> CatalogClient:
    return get_catalog_client()
