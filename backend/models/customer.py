# backend/models/customer.py
from sqlalchemy import Column, String, DateTime, func
from database import Base

CUSTOMERS_PARTITION = "CustomerProfile"

# Customer roles; Admin unlocks the management routes
ROLE_CUSTOMER = "Customer"
ROLE_ADMIN = "Admin"

# Represents a customer profile; the email doubles as row key and identity
class CustomerProfile(Base):
    __tablename__ = "customer_profiles"

    partition_key = Column(String, primary_key=True, default=CUSTOMERS_PARTITION)
    row_key = Column(String, primary_key=True)

    name = Column(String, nullable=False, default="")
    surname = Column(String, nullable=False, default="")
    email = Column(String, unique=True, nullable=False, index=True)
    phone_number = Column(String, nullable=False, default="")
    password_hash = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default=ROLE_CUSTOMER)
    image_url = Column(String, nullable=False, default="")
    created_date = Column(DateTime, server_default=func.now())

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"
