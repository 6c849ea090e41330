# backend/models/__init__.py
from models.product import Product
from models.customer import CustomerProfile
from models.order import Order
from models.session import ShopperSession
from models.queue import QueueMessage

__all__ = ["Product", "CustomerProfile", "Order", "ShopperSession", "QueueMessage"]
