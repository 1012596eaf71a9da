# storefront/repos/json_repo.py
import copy
import json
import os
import tempfile
import threading
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List

from storefront.domain.errors import ConflictError, StorageError
from storefront.domain.schemas import CartLine, ContactInfo, Product, Purchase, PurchaseItem
from storefront.repos.base import StorefrontRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Document = Dict[str, List[Dict[str, Any]]]


def _empty_document() -> Document:
    return {"products": [], "purchases": [], "purchase_items": []}


def _product_to_doc(product: Product) -> Dict[str, Any]:
    data = product.model_dump()
    data["price"] = str(data["price"])
    return data


class JsonStorefrontRepo(StorefrontRepo):
    """
    Document store kept in a single JSON file.

    Every write builds the full next document and commits it with one atomic
    file replace, so a checkout either lands completely (purchase and all of
    its items) or not at all. The cached document is only swapped after the
    file is on disk.
    """

    def __init__(self, path: str):
        self.path = os.path.abspath(path)
        self._lock = threading.RLock()
        self._doc = self._load()

    def _load(self) -> Document:
        directory = os.path.dirname(self.path)
        os.makedirs(directory, exist_ok=True)

        if not os.path.exists(self.path):
            doc = _empty_document()
            self._write(doc)
            return doc

        try:
            with open(self.path, encoding="utf-8") as f:
                content = f.read().strip()
        except OSError as e:
            raise StorageError(f"Could not read {self.path}") from e

        if not content:
            return _empty_document()
        try:
            doc = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt data file {self.path}") from e

        for key, value in _empty_document().items():
            doc.setdefault(key, value)
        return doc

    def _write(self, doc: Document) -> None:
        """Atomic write: temp file in the same directory, then rename."""
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", dir=os.path.dirname(self.path), delete=False, suffix=".tmp", encoding="utf-8"
            ) as tmp:
                tmp_path = tmp.name
                json.dump(doc, tmp, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write data file {self.path}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError("Could not write data file") from e

    def _commit(self, mutate: Callable[[Document], Any]) -> Any:
        with self._lock:
            staged = copy.deepcopy(self._doc)
            result = mutate(staged)
            self._write(staged)
            self._doc = staged
            return result

    def _find_product(self, doc: Document, product_id: str) -> Dict[str, Any] | None:
        return next((p for p in doc["products"] if p["id"] == product_id), None)

    # catalog
    def list_products(self) -> List[Product]:
        with self._lock:
            return [Product.model_validate(p) for p in self._doc["products"]]

    def list_featured(self) -> List[Product]:
        return [p for p in self.list_products() if p.featured]

    def get_product(self, product_id: str) -> Product | None:
        with self._lock:
            found = self._find_product(self._doc, product_id)
            return Product.model_validate(found) if found else None

    def add_product(self, product: Product) -> Product:
        def mutate(doc: Document):
            if self._find_product(doc, product.id):
                raise ConflictError(f"Product {product.id} already exists")
            doc["products"].append(_product_to_doc(product))

        self._commit(mutate)
        return product

    def remove_product(self, product_id: str) -> None:
        with self._lock:
            if not self._find_product(self._doc, product_id):
                return

            def mutate(doc: Document):
                doc["products"] = [p for p in doc["products"] if p["id"] != product_id]

            self._commit(mutate)

    def toggle_featured(self, product_id: str) -> Product | None:
        def mutate(doc: Document):
            found = self._find_product(doc, product_id)
            if found:
                found["featured"] = not found.get("featured", False)
            return found

        with self._lock:
            if not self._find_product(self._doc, product_id):
                return None
            updated = self._commit(mutate)
        return Product.model_validate(updated)

    def seed_if_empty(self, products: Iterable[Product]) -> bool:
        with self._lock:
            if self._doc["products"]:
                return False

            def mutate(doc: Document):
                doc["products"].extend(_product_to_doc(p) for p in products)

            self._commit(mutate)
            return True

    # purchases
    def create_purchase(self, contact: ContactInfo, lines: List[CartLine], total: Decimal) -> Purchase:
        created_at = datetime.now(timezone.utc)

        def mutate(doc: Document) -> Dict[str, Any]:
            purchase_id = max((p["id"] for p in doc["purchases"]), default=0) + 1
            next_item_id = max((i["id"] for i in doc["purchase_items"]), default=0) + 1

            record = {
                "id": purchase_id,
                "name": contact.name,
                "email": contact.email,
                "address": contact.address,
                "total": str(total),
                "created_at": created_at.isoformat(),
            }
            doc["purchases"].append(record)

            for offset, line in enumerate(lines):
                doc["purchase_items"].append(
                    {
                        "id": next_item_id + offset,
                        "purchase_id": purchase_id,
                        "product_id": line.product_id,
                        "name": line.name,
                        "price": str(line.price),
                        "qty": line.qty,
                        "image": line.image,
                    }
                )
            return record

        record = self._commit(mutate)
        return Purchase.model_validate(record)

    def get_purchase(self, purchase_id: int) -> Purchase | None:
        with self._lock:
            found = next((p for p in self._doc["purchases"] if p["id"] == purchase_id), None)
            return Purchase.model_validate(found) if found else None

    def get_purchase_items(self, purchase_id: int) -> List[PurchaseItem]:
        with self._lock:
            return [
                PurchaseItem.model_validate(i)
                for i in self._doc["purchase_items"]
                if i["purchase_id"] == purchase_id
            ]

    def count_purchases(self) -> int:
        with self._lock:
            return len(self._doc["purchases"])
