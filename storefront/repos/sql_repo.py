# storefront/repos/sql_repo.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.purchase import PurchaseModel
from storefront.data.models.purchase_item import PurchaseItemModel
from storefront.domain.errors import ConflictError, StorageError
from storefront.domain.schemas import CartLine, ContactInfo, Product, Purchase, PurchaseItem
from storefront.repos.base import StorefrontRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SqlStorefrontRepo(StorefrontRepo):
    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error during {action}: {e}")
            raise StorageError(f"Could not {action}") from e

    # catalog
    def list_products(self) -> List[Product]:
        rows = self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars().all()
        return [Product.model_validate(r) for r in rows]

    def list_featured(self) -> List[Product]:
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.featured.is_(True)).order_by(ProductModel.id)
        ).scalars().all()
        return [Product.model_validate(r) for r in rows]

    def get_product(self, product_id: str) -> Product | None:
        row = self.db.get(ProductModel, product_id)
        return Product.model_validate(row) if row else None

    def add_product(self, product: Product) -> Product:
        if self.db.get(ProductModel, product.id):
            raise ConflictError(f"Product {product.id} already exists")

        self.db.add(ProductModel(**product.model_dump()))
        try:
            self._commit("add product")
        except IntegrityError as e:
            # lost a race against another insert of the same id
            raise ConflictError(f"Product {product.id} already exists") from e
        return product

    def remove_product(self, product_id: str) -> None:
        row = self.db.get(ProductModel, product_id)
        if not row:
            return
        self.db.delete(row)
        self._commit("remove product")

    def toggle_featured(self, product_id: str) -> Product | None:
        row = self.db.get(ProductModel, product_id)
        if not row:
            return None
        row.featured = not row.featured
        self._commit("toggle featured flag")
        return Product.model_validate(row)

    def seed_if_empty(self, products: Iterable[Product]) -> bool:
        if self.db.execute(select(ProductModel.id).limit(1)).first():
            return False
        self.db.add_all(ProductModel(**p.model_dump()) for p in products)
        self._commit("seed products")
        return True

    # purchases
    def create_purchase(self, contact: ContactInfo, lines: List[CartLine], total: Decimal) -> Purchase:
        purchase = PurchaseModel(
            name=contact.name,
            email=contact.email,
            address=contact.address,
            total=total,
            created_at=datetime.now(timezone.utc),
        )
        purchase.items = [
            PurchaseItemModel(
                product_id=line.product_id,
                name=line.name,
                price=line.price,
                qty=line.qty,
                image=line.image,
            )
            for line in lines
        ]

        # purchase + items go out in one transaction
        self.db.add(purchase)
        try:
            self._commit("store purchase")
        except IntegrityError as e:
            raise StorageError("Could not store purchase") from e
        self.db.refresh(purchase)
        return Purchase.model_validate(purchase)

    def get_purchase(self, purchase_id: int) -> Purchase | None:
        row = self.db.get(PurchaseModel, purchase_id)
        return Purchase.model_validate(row) if row else None

    def get_purchase_items(self, purchase_id: int) -> List[PurchaseItem]:
        rows = self.db.execute(
            select(PurchaseItemModel)
            .where(PurchaseItemModel.purchase_id == purchase_id)
            .order_by(PurchaseItemModel.id)
        ).scalars().all()
        return [PurchaseItem.model_validate(r) for r in rows]

    def count_purchases(self) -> int:
        return self.db.execute(select(func.count(PurchaseModel.id))).scalar_one()
