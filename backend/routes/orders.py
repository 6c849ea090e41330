# backend/routes/orders.py
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.customer import ROLE_ADMIN
from schemas.order import OrderResponse
from utils.order_lifecycle import list_orders_for_customer, update_order_status, order_to_out
from utils.tokenJWT import role_required

router = APIRouter(prefix="/orders", tags=["Orders"])

admin_only = role_required(ROLE_ADMIN)

# Orders placed by one customer (Admin only)
@router.get("", response_model=List[OrderResponse])
def list_orders(
    customer_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    _admin=Depends(admin_only),
):
    return list_orders_for_customer(db, customer_id)

# Mark an order as Sent (Admin only)
@router.post("/{order_id}/status", response_model=OrderResponse)
def set_order_sent(
    order_id: str,
    db: Session = Depends(get_db),
    _admin=Depends(admin_only),
):
    return order_to_out(update_order_status(db, order_id))
