# backend/utils/order_lifecycle.py
import json
import logging
import uuid
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.customer import CustomerProfile, CUSTOMERS_PARTITION
from models.order import Order, ORDERS_PARTITION, STATUS_PROCESSING, STATUS_SENT
from models.session import ShopperSession
from schemas.order import OrderPayload, ProductLine, OrderResponse, OrderItemOut
from utils.cart_state import view_cart, cart_total, clear_cart
from utils.errors import NotFound, StorageFailure, ValidationFailed

logger = logging.getLogger(__name__)

# Hands a finished order to the persistence boundary; raises StorageFailure
OrderSubmitter = Callable[[OrderPayload], Awaitable[object]]

_lines_adapter = TypeAdapter(List[ProductLine])


def order_backup_name(customer_email: str, order_id: str) -> str:
    return f"{customer_email}_Order_{order_id}.json"


def products_to_json(products: List[ProductLine]) -> str:
    return json.dumps([p.model_dump(by_alias=True, mode="json") for p in products])


async def process_order(db: Session, shopper: ShopperSession, submit: OrderSubmitter) -> Optional[OrderPayload]:
    """Turn the session cart into an order and submit it.

    Returns None (and submits nothing) when the cart is empty. The cart is
    cleared only after `submit` succeeded, so a failed submission leaves it
    intact for another attempt.
    """
    lines = view_cart(shopper)
    if not lines:
        return None

    profile = db.get(CustomerProfile, (CUSTOMERS_PARTITION, shopper.customer_email))
    if profile is None:
        logger.error(f"Customer profile {shopper.customer_email} not found while processing order")
        raise NotFound(f"Customer {shopper.customer_email} not found")

    order = OrderPayload(
        order_id=str(uuid.uuid4()),
        customer_name=profile.full_name,
        customer_phone=profile.phone_number,
        customer_email=profile.email,
        products=[
            ProductLine(
                product_id=line.product_id,
                product_name=line.product_name,
                price=line.price,
                quantity=line.quantity,
            )
            for line in lines
        ],
        total_amount=cart_total(lines),
        date=datetime.utcnow(),
        order_status=STATUS_PROCESSING,
    )

    await submit(order)

    clear_cart(db, shopper)
    logger.info(f"Order {order.order_id} for {order.customer_email} submitted, total {order.total_amount}")
    return order


def update_order_status(db: Session, order_id: str) -> Order:
    """Mark an order as Sent.

    Any current status is overwritten and no version check is made, so
    concurrent updates end with the last write.
    """
    order = db.get(Order, (ORDERS_PARTITION, order_id))
    if order is None:
        logger.error(f"Order {order_id} not found for status update")
        raise NotFound(f"Order {order_id} not found")

    order.order_status = STATUS_SENT
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating order status: {e}")
        raise StorageFailure(f"Could not update order {order_id}") from e

    logger.info(f"Order {order_id} status updated to '{STATUS_SENT}'.")
    return order


def order_to_out(order: Order) -> OrderResponse:
    try:
        lines = _lines_adapter.validate_json(order.products or "[]")
    except ValidationError as e:
        logger.error(f"Stored products of order {order.row_key} are invalid: {e}")
        raise ValidationFailed(f"Order {order.row_key} has unreadable products") from e

    return OrderResponse(
        order_id=order.row_key,
        customer_name=order.customer_name or "",
        customer_phone=order.customer_phone or "",
        customer_email=order.customer_email,
        total_amount=order.total_amount,
        order_status=order.order_status,
        date=order.date,
        products=[
            OrderItemOut(
                product_id=line.product_id,
                product_name=line.product_name,
                price=line.price,
                quantity=line.quantity,
                line_total=round(line.price * line.quantity, 2),
            )
            for line in lines
        ],
    )


def list_orders_for_customer(db: Session, customer_id: str) -> List[OrderResponse]:
    orders = (
        db.query(Order)
        .filter(Order.partition_key == ORDERS_PARTITION, Order.customer_email == customer_id)
        .order_by(Order.date.asc())
        .all()
    )
    return [order_to_out(o) for o in orders]
