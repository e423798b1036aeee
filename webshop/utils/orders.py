"""Order submission."""
import uuid
from typing import Callable, Optional

from webshop.utils.cart import CartStore, cart_store
from webshop.utils.logging import get_logger, sanitize_for_logging

logger = get_logger(__name__)


def generate_order_id() -> str:
    """Generate a new unique order identifier."""
    return str(uuid.uuid4())


class OrderService:
    """
    Submits carts as orders.

    Order persistence happens downstream; this service only issues the
    order id and empties the cart. There is no rollback: once submitted,
    the cart stays cleared even if later order processing fails.
    """

    def __init__(self, store: Optional[CartStore] = None, id_factory: Callable[[], str] = generate_order_id):
        self.store = store or cart_store
        self.id_factory = id_factory

    def submit_cart(self, username: str) -> str:
        """
        Submit the user's cart.

        Args:
            username: User identifier

        Returns:
            New order id
        """
        order_id = self.id_factory()
        submitted = self.store.drain_cart(username)
        logger.info(
            "Submitted cart for %s with %d item(s) as order %s",
            sanitize_for_logging(username),
            submitted.item_count,
            order_id,
        )
        return order_id


# Global order service instance
order_service = OrderService()
