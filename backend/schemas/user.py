# backend/schemas/user.py
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from models.customer import CUSTOMERS_PARTITION, ROLE_CUSTOMER
from schemas.product import WireModel

# Shared properties for customer models
class UserBase(BaseModel):
    email: EmailStr

# Schema for authentication credentials
class UserLogin(UserBase):
    password: str

# Fields of the customer registration form
class CustomerCreate(UserBase):
    name: str = Field(min_length=1)
    surname: str = Field(min_length=1)
    phone_number: str = ""
    password: str = Field(min_length=1)

# Output schema for a customer profile (no password hash)
class CustomerResponse(BaseModel):
    email: str
    name: str
    surname: str
    phone_number: str
    role: str
    image_url: str = ""
    created_date: Optional[datetime] = None

    class Config:
        from_attributes = True

# Body of POST /api/StoreCustomerProfile
class CustomerPayload(WireModel):
    partition_key: str = CUSTOMERS_PARTITION
    row_key: Optional[str] = None
    name: Optional[str] = None
    surname: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    password_hash: Optional[str] = None
    role: str = ROLE_CUSTOMER
    image_url: Optional[str] = None
    created_date: Optional[datetime] = None

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# Current session summary
class SessionInfo(BaseModel):
    user_name: str
    email: str
    role: str
    login_time: datetime
    cart_count: int

# Files and log kept for one customer
class CustomerFiles(BaseModel):
    customer_name: str
    customer_files_content: str
    customer_logs_content: str
