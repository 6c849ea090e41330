# backend/models/session.py
from sqlalchemy import Column, Integer, String, DateTime, JSON, func
from database import Base

# Server-side state of one logged-in shopper; the session token carries its id.
# The row is removed on logout, taking the cart with it.
class ShopperSession(Base):
    __tablename__ = "shopper_sessions"

    id = Column(String, primary_key=True)
    customer_email = Column(String, nullable=False, index=True)
    customer_name = Column(String, nullable=False, default="")
    role = Column(String, nullable=False)
    login_time = Column(DateTime, nullable=False, server_default=func.now())

    # Cart lines as plain dicts, validated by schemas.cart on every read
    cart = Column(JSON, nullable=False, default=list)
    cart_count = Column(Integer, nullable=False, default=0)
