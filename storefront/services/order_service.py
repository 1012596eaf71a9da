# storefront/services/order_service.py
from storefront.domain.errors import InvalidRequestError, NotFoundError, StorageError
from storefront.domain.schemas import CheckoutOut, ContactInfo, PurchaseOut
from storefront.repos.base import StorefrontRepo, cart_total
from storefront.repos.cart_store import CartStore
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Turns a session cart into a stored purchase.
    Kept apart from CartService, carts are session state and purchases are durable.
    """

    def __init__(
        self,
        repo: StorefrontRepo,
        cart_store: CartStore,
        notification_service: NotificationService | None = None,
    ):
        self.repo = repo
        self.cart_store = cart_store
        self.notification_service = notification_service or NotificationService()

    def checkout(self, session_id: str, contact: ContactInfo) -> CheckoutOut:
        """
        Use case: checkout.

        1. Validate contact details
        2. Take the session lock, so one cart is never bought twice
        3. Store purchase + items as one unit
        4. Empty the cart, then notify
        """
        if not all(
            value and value.strip()
            for value in (contact.name, contact.email, contact.address)
        ):
            raise InvalidRequestError("Missing checkout details")

        #no waiting here, a second checkout of a busy cart is refused
        with self.cart_store.lock(session_id, wait=False):
            lines = self.cart_store.load(session_id)
            if not lines:
                raise InvalidRequestError("Cart is empty")

            total = cart_total(lines)
            purchase = self.repo.create_purchase(contact, lines, total)

            # only reached when the purchase is stored
            try:
                self.cart_store.clear(session_id)
            except StorageError:
                logger.error(
                    f"Purchase {purchase.id} stored but the cart for session "
                    f"{session_id[:8]} could not be cleared"
                )
                raise

        logger.info(
            f"Purchase {purchase.id} created with {len(lines)} item(s), total {total}"
        )
        self.notification_service.send_purchase_notification(purchase.id, purchase.email)

        return CheckoutOut(message="Purchase complete", purchase_id=purchase.id, total=total)

    def get_purchase(self, purchase_id: int) -> PurchaseOut:
        purchase = self.repo.get_purchase(purchase_id)
        if not purchase:
            raise NotFoundError("Purchase not found")

        items = self.repo.get_purchase_items(purchase_id)
        return PurchaseOut(purchase=purchase, items=items)
