#import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.product import ProductModel
from storefront.data.models.purchase import PurchaseModel
from storefront.data.models.purchase_item import PurchaseItemModel

__all__ = ["ProductModel", "PurchaseModel", "PurchaseItemModel"]
