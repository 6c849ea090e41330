# backend/schemas/product.py
import uuid
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_pascal
from typing import Optional, List

from models.product import PRODUCTS_PARTITION


# Wire format shared with the ingest functions (PascalCase keys)
class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


# Body of POST /api/StoreProduct
class ProductPayload(WireModel):
    partition_key: str = PRODUCTS_PARTITION
    row_key: str = Field(default_factory=lambda: str(uuid.uuid4()))
    product_name: Optional[str] = None
    price: float = Field(default=0, ge=0)
    quantity: int = Field(default=0, ge=0)
    image_url: Optional[str] = None
    created_date: Optional[datetime] = None


# Product as listed by the web tier
class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_name: str
    price: float
    quantity: int
    image_url: str = ""
    created_date: Optional[datetime] = None


class ProductList(BaseModel):
    items: List[ProductOut]
    total: int


# Result of an admin product submission
class ProductStored(BaseModel):
    message: str
