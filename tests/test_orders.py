"""
Tests for order submission
"""

import itertools
import logging
import uuid

from webshop.utils.cart import CartLine
from webshop.utils.orders import OrderService, generate_order_id


def test_generate_order_id_is_uuid():
    order_id = generate_order_id()

    assert str(uuid.UUID(order_id)) == order_id


def test_submit_clears_cart(store):
    store.add_lines("alice", [CartLine("A", 2), CartLine("B", 1)])
    service = OrderService(store=store)

    order_id = service.submit_cart("alice")

    assert order_id
    assert store.get_cart("alice").positions == []
    assert store.item_count("alice") == 0
    assert store.has_cart("alice") is True


def test_submit_issues_distinct_ids(store):
    service = OrderService(store=store)

    ids = {service.submit_cart("alice") for _ in range(50)}

    assert len(ids) == 50


def test_submit_only_clears_own_cart(store):
    store.add_line("alice", "A", 1)
    store.add_line("bob", "B", 1)

    OrderService(store=store).submit_cart("alice")

    assert store.get_cart("bob").positions == [CartLine("B", 1)]


def test_submit_empty_cart_still_returns_id(store):
    assert OrderService(store=store).submit_cart("nobody")


def test_custom_id_factory(store):
    counter = itertools.count(1)
    service = OrderService(store=store, id_factory=lambda: f"ORD-{next(counter)}")

    assert service.submit_cart("alice") == "ORD-1"
    assert service.submit_cart("alice") == "ORD-2"


def test_submit_logs_the_cleared_item_count(store, caplog):
    store.add_lines("alice", [CartLine("A", 2), CartLine("B", 3)])
    caplog.set_level(logging.INFO, logger="webshop.utils.orders")

    OrderService(store=store, id_factory=lambda: "order-7").submit_cart("alice")

    assert "with 5 item(s) as order order-7" in caplog.text
