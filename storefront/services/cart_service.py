from typing import List

from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import CartLine, CartOut
from storefront.repos.base import StorefrontRepo, cart_total
from storefront.repos.cart_store import CartStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _clamp_qty(qty: int | None) -> int:
    return max(1, int(qty or 1))


def build_cart_out(lines: List[CartLine]) -> CartOut:
    #total is never cached, always recomputed from the lines
    return CartOut(
        items=lines,
        total=cart_total(lines),
        count=sum(line.qty for line in lines),
    )


class CartService:
    """
    Session cart use cases
    commands (add, update, remove) change the cart under the session lock,
    waiting for a concurrent change of the same cart to finish
    query (read) only reads
    """

    def __init__(self, repo: StorefrontRepo, cart_store: CartStore):
        self.repo = repo
        self.cart_store = cart_store

    #query
    def read(self, session_id: str) -> CartOut:
        return build_cart_out(self.cart_store.load(session_id))

    #commands
    def add(self, session_id: str, product_id: str | None, qty: int | None = None) -> CartOut:
        quantity = _clamp_qty(qty)

        product = self.repo.get_product(product_id) if product_id else None
        if not product:
            raise NotFoundError("Product not found")

        with self.cart_store.lock(session_id):
            lines = self.cart_store.load(session_id)
            existing = next((line for line in lines if line.product_id == product_id), None)

            if existing:
                logger.info(
                    f"Product {product_id} already in cart, qty "
                    f"{existing.qty} -> {existing.qty + quantity}"
                )
                existing.qty += quantity
            else:
                logger.info(f"Adding product {product_id} x{quantity} to cart")
                #snapshot, later catalog edits do not touch the cart
                lines.append(
                    CartLine(
                        product_id=product.id,
                        name=product.name,
                        price=product.price,
                        image=product.image,
                        qty=quantity,
                    )
                )

            self.cart_store.save(session_id, lines)
            return build_cart_out(lines)

    def update(self, session_id: str, product_id: str | None, qty: int | None) -> CartOut:
        quantity = _clamp_qty(qty)

        with self.cart_store.lock(session_id):
            lines = self.cart_store.load(session_id)
            existing = next((line for line in lines if line.product_id == product_id), None)
            if not existing:
                raise NotFoundError("Item not found")

            existing.qty = quantity
            self.cart_store.save(session_id, lines)
            logger.info(f"Cart line {product_id} set to qty {quantity}")
            return build_cart_out(lines)

    def remove(self, session_id: str, product_id: str | None) -> CartOut:
        with self.cart_store.lock(session_id):
            lines = self.cart_store.load(session_id)
            remaining = [line for line in lines if line.product_id != product_id]

            if len(remaining) != len(lines):
                self.cart_store.save(session_id, remaining)
                logger.info(f"Removed product {product_id} from cart")
            return build_cart_out(remaining)
