# backend/models/order.py
from sqlalchemy import Column, String, Float, DateTime, Text, func
from database import Base

ORDERS_PARTITION = "Orders"

STATUS_PROCESSING = "Processing"
STATUS_SENT = "Sent"

class Order(Base):
    __tablename__ = "orders"

    partition_key = Column(String, primary_key=True, default=ORDERS_PARTITION)
    row_key = Column(String, primary_key=True) # Order id

    # Customer snapshot taken at checkout
    customer_name = Column(String, nullable=False, default="")
    customer_email = Column(String, nullable=False, index=True)
    customer_phone = Column(String, nullable=False, default="")

    # Serialized JSON list of the product lines at checkout
    products = Column(Text, nullable=False, default="[]")
    total_amount = Column(Float, nullable=False, default=0)
    order_status = Column(String, nullable=False, default=STATUS_PROCESSING, index=True)
    date = Column(DateTime, server_default=func.now())
