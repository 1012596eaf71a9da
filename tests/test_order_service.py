import logging
import threading
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from storefront.data.seed import DEMO_PRODUCTS
from storefront.domain.errors import ConflictError, InvalidRequestError, NotFoundError, StorageError
from storefront.domain.schemas import ContactInfo
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService

SESSION = "session-a"
CONTACT = ContactInfo(name="Ana", email="ana@example.com", address="Av. Julius Nyerere 1, Maputo")


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def orders(repo, cart_store, notifier):
    return OrderService(repo=repo, cart_store=cart_store, notification_service=notifier)


@pytest.fixture
def carts(repo, cart_store):
    return CartService(repo=repo, cart_store=cart_store)


def test_checkout_persists_purchase_and_items(orders, carts, repo, notifier):
    carts.add(SESSION, "p1", 2)

    result = orders.checkout(SESSION, CONTACT)

    assert result.message == "Purchase complete"
    assert result.total == Decimal("378.00")
    assert repo.count_purchases() == 1

    purchase = repo.get_purchase(result.purchase_id)
    assert purchase.total == Decimal("378.00")
    assert purchase.name == "Ana"
    assert purchase.created_at is not None

    items = repo.get_purchase_items(result.purchase_id)
    assert len(items) == 1
    assert items[0].purchase_id == result.purchase_id
    assert items[0].product_id == "p1"
    assert items[0].qty == 2
    assert items[0].price == Decimal("189.00")

    assert carts.read(SESSION).items == []
    notifier.send_purchase_notification.assert_called_once_with(result.purchase_id, "ana@example.com")


def test_checkout_with_empty_cart_is_invalid(orders, repo):
    with pytest.raises(InvalidRequestError, match="Cart is empty"):
        orders.checkout(SESSION, CONTACT)
    assert repo.count_purchases() == 0


@pytest.mark.parametrize(
    "contact",
    [
        ContactInfo(email="ana@example.com", address="Maputo"),
        ContactInfo(name="Ana", address="Maputo"),
        ContactInfo(name="Ana", email="ana@example.com", address="   "),
    ],
)
def test_checkout_requires_contact_details(orders, carts, repo, contact):
    carts.add(SESSION, "p1")

    with pytest.raises(InvalidRequestError, match="Missing checkout details"):
        orders.checkout(SESSION, contact)

    assert repo.count_purchases() == 0
    assert len(carts.read(SESSION).items) == 1


def test_purchase_ids_increase(orders, carts):
    ids = []
    for _ in range(3):
        carts.add(SESSION, "p3")
        ids.append(orders.checkout(SESSION, CONTACT).purchase_id)

    assert ids == sorted(ids)
    assert len(set(ids)) == 3


def test_multi_line_checkout_items_share_purchase(orders, carts, repo):
    carts.add(SESSION, "p1")
    carts.add(SESSION, "p2", 2)
    carts.add(SESSION, "p3")

    result = orders.checkout(SESSION, CONTACT)

    items = repo.get_purchase_items(result.purchase_id)
    assert {i.product_id for i in items} == {"p1", "p2", "p3"}
    assert {i.purchase_id for i in items} == {result.purchase_id}
    assert result.total == Decimal("189.00") + 2 * Decimal("499.00") + Decimal("129.00")


def test_get_purchase_returns_items(orders, carts):
    carts.add(SESSION, "p2")
    purchase_id = orders.checkout(SESSION, CONTACT).purchase_id

    out = orders.get_purchase(purchase_id)
    assert out.purchase.id == purchase_id
    assert [i.product_id for i in out.items] == ["p2"]


def test_get_unknown_purchase_raises_not_found(orders):
    with pytest.raises(NotFoundError):
        orders.get_purchase(999)


def test_checkout_while_cart_locked_is_conflict(orders, carts, cart_store, repo):
    carts.add(SESSION, "p1")

    with cart_store.lock(SESSION):
        with pytest.raises(ConflictError):
            orders.checkout(SESSION, CONTACT)

    assert repo.count_purchases() == 0
    assert len(carts.read(SESSION).items) == 1


def test_sql_failure_rolls_back_everything(sql_repo, cart_store, notifier):
    sql_repo.seed_if_empty(DEMO_PRODUCTS)
    carts = CartService(sql_repo, cart_store)
    orders = OrderService(sql_repo, cart_store, notifier)
    carts.add(SESSION, "p1", 2)
    carts.add(SESSION, "p2")

    boom = OperationalError("INSERT INTO purchase_items", {}, Exception("disk I/O error"))
    with patch.object(sql_repo.db, "commit", side_effect=boom):
        with pytest.raises(StorageError):
            orders.checkout(SESSION, CONTACT)

    assert sql_repo.count_purchases() == 0
    assert sql_repo.get_purchase_items(1) == []
    assert len(carts.read(SESSION).items) == 2
    notifier.send_purchase_notification.assert_not_called()


def test_json_write_failure_leaves_store_untouched(json_repo, cart_store, notifier):
    json_repo.seed_if_empty(DEMO_PRODUCTS)
    carts = CartService(json_repo, cart_store)
    orders = OrderService(json_repo, cart_store, notifier)
    carts.add(SESSION, "p1", 2)

    with open(json_repo.path, encoding="utf-8") as f:
        on_disk = f.read()

    with patch("storefront.repos.json_repo.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(StorageError):
            orders.checkout(SESSION, CONTACT)

    with open(json_repo.path, encoding="utf-8") as f:
        assert f.read() == on_disk
    assert json_repo.count_purchases() == 0
    assert json_repo.get_purchase_items(1) == []
    assert len(carts.read(SESSION).items) == 1


def test_concurrent_checkouts_buy_cart_once(json_repo, cart_store, notifier):
    json_repo.seed_if_empty(DEMO_PRODUCTS)
    carts = CartService(json_repo, cart_store)
    orders = OrderService(json_repo, cart_store, notifier)
    carts.add(SESSION, "p1", 2)

    barrier = threading.Barrier(4)
    results, errors = [], []

    def attempt():
        barrier.wait()
        try:
            results.append(orders.checkout(SESSION, CONTACT))
        except (ConflictError, InvalidRequestError) as e:
            errors.append(e)

    threads = [threading.Thread(target=attempt) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 1
    assert len(errors) == 3
    assert json_repo.count_purchases() == 1
    assert carts.read(SESSION).items == []


def test_cart_clear_failure_logs_stored_purchase(repo, cart_store, notifier, caplog):
    carts = CartService(repo, cart_store)
    carts.add(SESSION, "p2")
    orders = OrderService(repo, cart_store, notifier)

    with patch.object(cart_store, "clear", side_effect=StorageError("Cart storage unavailable")):
        with caplog.at_level(logging.ERROR, logger="storefront"):
            with pytest.raises(StorageError):
                orders.checkout(SESSION, CONTACT)

    assert repo.count_purchases() == 1
    assert "Purchase 1 stored but the cart" in caplog.text
    notifier.send_purchase_notification.assert_not_called()
