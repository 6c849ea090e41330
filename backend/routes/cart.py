# backend/routes/cart.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.session import ShopperSession
from schemas.cart import CartAddItem, CartUpdate, CartOut, CartLine
from schemas.order import CheckoutResponse
from utils.cart_state import add_to_cart, update_quantities, remove_from_cart, view_cart, cart_count, cart_total
from utils.functions_client import functions_client
from utils.order_lifecycle import process_order
from utils.tokenJWT import get_current_session

router = APIRouter(prefix="/cart", tags=["Cart"])

def _cart_to_out(lines: List[CartLine]) -> CartOut:
    return CartOut(items=lines, count=cart_count(lines), total=round(cart_total(lines), 2))

@router.get("", response_model=CartOut)
def get_cart(shopper: ShopperSession = Depends(get_current_session)):
    return _cart_to_out(view_cart(shopper))

@router.post("/add", response_model=CartOut)
def add_item(
    payload: CartAddItem,
    db: Session = Depends(get_db),
    shopper: ShopperSession = Depends(get_current_session)
):
    return _cart_to_out(add_to_cart(db, shopper, payload.product_id))

@router.post("/update", response_model=CartOut)
def update_cart(
    payload: CartUpdate,
    db: Session = Depends(get_db),
    shopper: ShopperSession = Depends(get_current_session)
):
    return _cart_to_out(update_quantities(db, shopper, payload.quantities))

@router.delete("/items/{product_id}", response_model=CartOut)
def delete_item(
    product_id: str,
    db: Session = Depends(get_db),
    shopper: ShopperSession = Depends(get_current_session)
):
    return _cart_to_out(remove_from_cart(db, shopper, product_id))

# Turn the cart into an order through the StoreCustomerOrder function
@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    db: Session = Depends(get_db),
    shopper: ShopperSession = Depends(get_current_session)
):
    order = await process_order(db, shopper, functions_client.store_order)
    if order is None:
        raise HTTPException(status_code=400, detail="Cart is empty")
    return CheckoutResponse(order_id=order.order_id, total_amount=order.total_amount, order_status=order.order_status)
