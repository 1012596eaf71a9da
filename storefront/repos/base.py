# storefront/repos/base.py
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, List

from storefront.domain.schemas import CartLine, ContactInfo, Product, Purchase, PurchaseItem


def cart_total(lines: Iterable[CartLine]) -> Decimal:
    return sum((line.price * line.qty for line in lines), Decimal("0.00"))


class StorefrontRepo(ABC):
    """
    Storage contract shared by the relational and the JSON file backends.
    Catalog reads/writes plus durable purchases with their line items.
    """

    # catalog
    @abstractmethod
    def list_products(self) -> List[Product]: ...

    @abstractmethod
    def list_featured(self) -> List[Product]: ...

    @abstractmethod
    def get_product(self, product_id: str) -> Product | None: ...

    @abstractmethod
    def add_product(self, product: Product) -> Product:
        """Raises ConflictError if the id is already taken."""

    @abstractmethod
    def remove_product(self, product_id: str) -> None: ...

    @abstractmethod
    def toggle_featured(self, product_id: str) -> Product | None: ...

    @abstractmethod
    def seed_if_empty(self, products: Iterable[Product]) -> bool: ...

    # purchases
    @abstractmethod
    def create_purchase(self, contact: ContactInfo, lines: List[CartLine], total: Decimal) -> Purchase:
        """
        Persist one purchase and one item per cart line as a single unit.
        Either everything is stored or StorageError is raised and nothing is.
        """

    @abstractmethod
    def get_purchase(self, purchase_id: int) -> Purchase | None: ...

    @abstractmethod
    def get_purchase_items(self, purchase_id: int) -> List[PurchaseItem]: ...

    @abstractmethod
    def count_purchases(self) -> int: ...
