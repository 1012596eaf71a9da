from typing import List

from storefront.data.seed import DEMO_PRODUCTS
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import Product
from storefront.repos.base import StorefrontRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    def __init__(self, repo: StorefrontRepo):
        self.repo = repo

    def list_products(self) -> List[Product]:
        return self.repo.list_products()

    def list_featured(self) -> List[Product]:
        return self.repo.list_featured()

    def get_product(self, product_id: str) -> Product:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def add_product(self, product: Product) -> Product:
        created = self.repo.add_product(product)
        logger.info(f"Product {product.id} added to catalog")
        return created

    def remove_product(self, product_id: str) -> None:
        self.repo.remove_product(product_id)
        logger.info(f"Product {product_id} removed from catalog")

    def toggle_featured(self, product_id: str) -> Product:
        product = self.repo.toggle_featured(product_id)
        if not product:
            raise NotFoundError("Product not found")
        logger.info(f"Product {product_id} featured={product.featured}")
        return product

    def seed(self) -> bool:
        seeded = self.repo.seed_if_empty(DEMO_PRODUCTS)
        if seeded:
            logger.info(f"Seeded catalog with {len(DEMO_PRODUCTS)} demo products")
        return seeded
