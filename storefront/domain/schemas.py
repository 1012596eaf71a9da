# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# decimal internally, plain number on the wire
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class Product(BaseModel):
    """Catalog product."""

    id: str = Field(..., min_length=1, description="Stable product id, e.g. p1")
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Money = Field(..., ge=0)
    image: str = ""
    featured: bool = False

    model_config = ConfigDict(from_attributes=True)


class ProductIn(Product):
    """Schema for adding a product from the admin API."""


class ProductOut(BaseModel):
    product: Product


class ProductListOut(BaseModel):
    products: List[Product]


class CartLine(BaseModel):
    """One product entry in a session cart (snapshot taken at add time)."""

    product_id: str = Field(..., alias="productId")
    name: str
    price: Money
    image: str = ""
    qty: int = Field(..., ge=1)

    model_config = ConfigDict(populate_by_name=True)


class CartOut(BaseModel):
    items: List[CartLine]
    total: Money
    count: int = 0


class CartItemIn(BaseModel):
    product_id: str | None = Field(None, alias="productId")
    qty: int | None = None

    model_config = ConfigDict(populate_by_name=True)


class CartRemoveIn(BaseModel):
    product_id: str | None = Field(None, alias="productId")

    model_config = ConfigDict(populate_by_name=True)


class ContactInfo(BaseModel):
    """Checkout contact details.

    Fields are optional here so that a missing value is reported by the
    order service as a 400, not by request validation as a 422.
    """

    name: str | None = None
    email: str | None = None
    address: str | None = None


class CheckoutOut(BaseModel):
    message: str
    purchase_id: int = Field(..., alias="purchaseId")
    total: Money

    model_config = ConfigDict(populate_by_name=True)


class Purchase(BaseModel):
    id: int
    name: str
    email: str
    address: str
    total: Money
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PurchaseItem(BaseModel):
    id: int
    purchase_id: int
    product_id: str
    name: str
    price: Money
    qty: int
    image: str = ""

    model_config = ConfigDict(from_attributes=True)


class PurchaseOut(BaseModel):
    purchase: Purchase
    items: List[PurchaseItem]


class ChatIn(BaseModel):
    message: str | None = None


class ChatOut(BaseModel):
    reply: str


class LocationOut(BaseModel):
    name: str
    address: str
    phone: str
    hours: str
    map_url: str = Field(..., alias="mapUrl")

    model_config = ConfigDict(populate_by_name=True)


class PaymentLineIn(BaseModel):
    """Cart entry as sent by the browser; price may carry a currency sign."""

    title: str = ""
    price: str | float | int = 0
    image: str | None = None
    qty: int | None = None


class PaymentSessionIn(BaseModel):
    cart: List[PaymentLineIn] | None = None


class PaymentSessionOut(BaseModel):
    url: str
