#storefront/data/models/product.py
from sqlalchemy import Boolean, Column, Numeric, String, Text

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")

    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(512), nullable=False, default="")
    featured = Column(Boolean, nullable=False, default=False)
