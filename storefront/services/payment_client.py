# storefront/services/payment_client.py
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List

import stripe

from storefront.domain.errors import InvalidRequestError, UpstreamUnavailableError
from storefront.domain.schemas import PaymentLineIn
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.]")


def to_cents(price) -> int:
    #browser sends prices like "$123" or 123.5
    numeric = _NON_NUMERIC.sub("", str(price if price is not None else ""))
    try:
        amount = Decimal(numeric or "0")
    except InvalidOperation:
        amount = Decimal("0")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def absolute_url(path: str, base_url: str) -> str:
    if path.startswith("http"):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def build_line_items(cart: List[PaymentLineIn], base_url: str) -> List[Dict[str, Any]]:
    """Convert the browser cart to Stripe Checkout line_items."""
    line_items: List[Dict[str, Any]] = []

    for item in cart:
        product_data: Dict[str, Any] = {"name": item.title or "Item"}
        if item.image:
            product_data["images"] = [absolute_url(item.image, base_url)]

        line_items.append(
            {
                "quantity": item.qty or 1,
                "price_data": {
                    "currency": "usd",
                    "unit_amount": to_cents(item.price),
                    "product_data": product_data,
                },
            }
        )
    return line_items


class PaymentClient:
    """Creates hosted Stripe Checkout sessions."""

    def __init__(self, secret_key: str | None = None):
        self.secret_key = settings.STRIPE_SECRET_KEY if secret_key is None else secret_key

    def create_checkout_session(self, cart: List[PaymentLineIn] | None, base_url: str) -> str:
        if not cart:
            raise InvalidRequestError("Cart is empty")
        if not self.secret_key:
            raise UpstreamUnavailableError("Stripe not configured. Set STRIPE_SECRET_KEY in .env.")

        base = base_url.rstrip("/")
        logger.info(f"Creating Stripe checkout session with {len(cart)} line(s)")

        try:
            checkout_session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=build_line_items(cart, base),
                success_url=f"{base}/cart?success=1",
                cancel_url=f"{base}/cart?canceled=1",
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session failed: {e}")
            raise UpstreamUnavailableError("Stripe error") from e

        url = getattr(checkout_session, "url", None)
        if not url:
            raise UpstreamUnavailableError("Stripe error")
        return url
