# backend/schemas/cart.py
from pydantic import BaseModel, Field
from typing import Dict, List

# Snapshot of a product held in a shopper's cart
class CartLine(BaseModel):
    product_id: str
    product_name: str
    price: float
    quantity: int
    image_url: str = ""

# Request schema for adding a product to the cart
class CartAddItem(BaseModel):
    product_id: str = Field(min_length=1)

# Request schema for bulk quantity updates, keyed by product id
class CartUpdate(BaseModel):
    quantities: Dict[str, int]

# Response schema for the cart summary
class CartOut(BaseModel):
    items: List[CartLine]
    count: int
    total: float
