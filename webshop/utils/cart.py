"""Cart state management for webshop users."""
import threading
from typing import Dict, Iterable, List, Optional, Protocol
from dataclasses import dataclass, field


@dataclass
class CartLine:
    """One article/quantity position in a cart."""
    article_number: str
    quantity: int

    def to_dict(self) -> Dict[str, object]:
        return {"articleNumber": self.article_number, "quantity": self.quantity}


@dataclass
class Cart:
    """Ordered cart positions; at most one line per article number."""
    positions: List[CartLine] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        """Sum of quantities across all positions."""
        return sum(line.quantity for line in self.positions)

    def find(self, article_number: str) -> Optional[CartLine]:
        """Return the line for an article number, if present."""
        for line in self.positions:
            if line.article_number == article_number:
                return line
        return None

    def copy(self) -> "Cart":
        return Cart(positions=[CartLine(line.article_number, line.quantity) for line in self.positions])

    def to_dict(self) -> Dict[str, object]:
        return {"positions": [line.to_dict() for line in self.positions]}


class CartStorage(Protocol):
    """Backend holding carts keyed by username."""

    def load(self, username: str) -> Optional[Cart]: ...

    def save(self, username: str, cart: Cart) -> None: ...

    def contains(self, username: str) -> bool: ...


class InMemoryCartStorage:
    """Process-local cart storage backed by a dict."""

    def __init__(self, carts: Optional[Dict[str, Cart]] = None):
        # username -> Cart
        self._carts: Dict[str, Cart] = carts if carts is not None else {}

    def load(self, username: str) -> Optional[Cart]:
        cart = self._carts.get(username)
        return cart.copy() if cart is not None else None

    def save(self, username: str, cart: Cart) -> None:
        self._carts[username] = cart.copy()

    def contains(self, username: str) -> bool:
        return username in self._carts


class CartStore:
    """
    Manages shopping carts per username.

    The store does no input validation: callers must pass a non-empty
    username and article number and a positive quantity. Every operation
    runs under a lock so that no reader observes a half-applied mutation,
    and carts returned to callers are copies of the stored state.
    """

    def __init__(self, storage: Optional[CartStorage] = None):
        """
        Initialize the store.

        Args:
            storage: Cart backend (defaults to an empty in-memory storage)
        """
        self._storage = storage if storage is not None else InMemoryCartStorage()
        self._lock = threading.RLock()

    def _load(self, username: str) -> Cart:
        return self._storage.load(username) or Cart()

    @staticmethod
    def _apply_add(cart: Cart, article_number: str, quantity: int) -> None:
        existing = cart.find(article_number)
        if existing is not None:
            existing.quantity += quantity
        else:
            cart.positions.append(CartLine(article_number=article_number, quantity=quantity))

    def get_cart(self, username: str) -> Cart:
        """
        Get the cart for a user.

        Args:
            username: User identifier

        Returns:
            Stored cart, or a new empty cart which is not persisted
        """
        with self._lock:
            return self._load(username)

    def has_cart(self, username: str) -> bool:
        """Whether a cart has ever been written for this username."""
        with self._lock:
            return self._storage.contains(username)

    def add_line(self, username: str, article_number: str, quantity: int) -> Cart:
        """
        Add an article to the cart.

        If the article is already in the cart its quantity is increased by
        ``quantity``; otherwise a new line is appended.

        Args:
            username: User identifier
            article_number: Catalog article number
            quantity: Quantity to add

        Returns:
            Updated cart
        """
        with self._lock:
            cart = self._load(username)
            self._apply_add(cart, article_number, quantity)
            self._storage.save(username, cart)
            return cart

    def add_lines(self, username: str, lines: Iterable[CartLine]) -> Cart:
        """
        Add several articles in one update.

        Lines are applied in order with ``add_line`` semantics, so repeated
        article numbers accumulate.

        Args:
            username: User identifier
            lines: Lines to add

        Returns:
            Updated cart
        """
        with self._lock:
            cart = self._load(username)
            for line in lines:
                self._apply_add(cart, line.article_number, line.quantity)
            self._storage.save(username, cart)
            return cart

    def remove_line(self, username: str, article_number: str) -> Cart:
        """
        Remove an article from the cart. Removing an absent article is a no-op.

        Args:
            username: User identifier
            article_number: Article number to remove

        Returns:
            Updated cart
        """
        with self._lock:
            cart = self._load(username)
            cart.positions = [line for line in cart.positions if line.article_number != article_number]
            self._storage.save(username, cart)
            return cart

    def set_line_quantity(self, username: str, article_number: str, quantity: int) -> Cart:
        """
        Replace the quantity of a line, creating the line if it is absent.

        Args:
            username: User identifier
            article_number: Article number to update
            quantity: New quantity (must be > 0)

        Returns:
            Updated cart
        """
        with self._lock:
            cart = self._load(username)
            existing = cart.find(article_number)
            if existing is not None:
                existing.quantity = quantity
            else:
                cart.positions.append(CartLine(article_number=article_number, quantity=quantity))
            self._storage.save(username, cart)
            return cart

    def clear_cart(self, username: str) -> Cart:
        """Replace the user's cart with an empty one. The key stays present."""
        with self._lock:
            cart = Cart()
            self._storage.save(username, cart)
            return cart

    def drain_cart(self, username: str) -> Cart:
        """
        Empty the user's cart and return what it held, in one locked step.

        Args:
            username: User identifier

        Returns:
            Cart contents before clearing
        """
        with self._lock:
            previous = self._load(username)
            self._storage.save(username, Cart())
            return previous

    def item_count(self, username: str) -> int:
        """Total number of items (sum of quantities) in the user's cart."""
        with self._lock:
            return self._load(username).item_count


# Global cart store instance
cart_store = CartStore()
