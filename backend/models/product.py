# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, func
from database import Base

PRODUCTS_PARTITION = "Products"

# Product
# A catalogue entry keyed by (partition_key, row_key); row_key is the product id.
# The quantity here is stock on hand; carts keep their own copy.
class Product(Base):
    __tablename__ = "products"

    partition_key = Column(String, primary_key=True, default=PRODUCTS_PARTITION)
    row_key = Column(String, primary_key=True, index=True)

    product_name = Column(String, nullable=False, index=True)
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False, default=0)
    quantity = Column(Integer, CheckConstraint("quantity >= 0"), nullable=False, default=0)

    # Blob URL of the product image, empty when none was uploaded
    image_url = Column(String, nullable=False, default="")
    created_date = Column(DateTime, server_default=func.now())
