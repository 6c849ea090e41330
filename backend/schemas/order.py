# backend/schemas/order.py
import uuid
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from models.order import STATUS_PROCESSING
from schemas.product import WireModel


# Product line inside an order payload
class ProductLine(WireModel):
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    price: float = 0
    quantity: int = 0


# Order as submitted to StoreCustomerOrder and carried on the orders queue
class OrderPayload(WireModel):
    order_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    products: List[ProductLine] = Field(default_factory=list)
    total_amount: float = 0
    date: Optional[datetime] = None
    order_status: str = STATUS_PROCESSING


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    price: float
    quantity: int
    line_total: float


# Output schema representing a stored order
class OrderResponse(BaseModel):
    order_id: str
    customer_name: str
    customer_phone: str
    customer_email: str
    total_amount: float
    order_status: str
    date: Optional[datetime] = None
    products: List[OrderItemOut]


# Returned by checkout
class CheckoutResponse(BaseModel):
    order_id: str
    total_amount: float
    order_status: str
