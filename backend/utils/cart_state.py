# backend/utils/cart_state.py
import logging
from typing import Dict, List, Optional
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from models.product import Product, PRODUCTS_PARTITION
from models.session import ShopperSession
from schemas.cart import CartLine
from utils.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)

_cart_adapter = TypeAdapter(List[CartLine])


def view_cart(shopper: Optional[ShopperSession]) -> List[CartLine]:
    """Current cart lines of the session, validated; [] when there is no cart."""
    if shopper is None or not shopper.cart:
        return []
    try:
        return _cart_adapter.validate_python(shopper.cart)
    except ValidationError as e:
        logger.error(f"Cart of session {shopper.id} is invalid: {e}")
        raise ValidationFailed("Cart contents are invalid") from e


def cart_count(lines: List[CartLine]) -> int:
    return sum(line.quantity for line in lines)


def cart_total(lines: List[CartLine]) -> float:
    return sum(line.price * line.quantity for line in lines)


def _save_cart(db: Session, shopper: ShopperSession, lines: List[CartLine]) -> None:
    # Assign a new list so the JSON column is flagged as changed
    shopper.cart = [line.model_dump() for line in lines]
    shopper.cart_count = cart_count(lines)
    db.commit()


def clear_cart(db: Session, shopper: ShopperSession) -> None:
    shopper.cart = []
    shopper.cart_count = 0
    db.commit()


def add_to_cart(db: Session, shopper: ShopperSession, product_id: str) -> List[CartLine]:
    lines = view_cart(shopper)

    product = db.get(Product, (PRODUCTS_PARTITION, product_id))
    if product is None:
        logger.error(f"Product with ID {product_id} could not be found.")
        raise NotFound(f"Product {product_id} not found")

    existing = next((line for line in lines if line.product_id == product_id), None)
    if existing is not None:
        existing.quantity += 1
    else:
        lines.append(CartLine(
            product_id=product.row_key,
            product_name=product.product_name,
            price=product.price,
            quantity=1,
            image_url=product.image_url or "",
        ))

    _save_cart(db, shopper, lines)
    return lines


def update_quantities(db: Session, shopper: ShopperSession, quantities: Dict[str, int]) -> List[CartLine]:
    """Set the quantity of every line named in `quantities`.

    Values are taken as given: zero and negative quantities are stored too.
    """
    lines = view_cart(shopper)
    if not lines:
        return lines

    for line in lines:
        if line.product_id in quantities:
            line.quantity = quantities[line.product_id]

    _save_cart(db, shopper, lines)
    return lines


def remove_from_cart(db: Session, shopper: ShopperSession, product_id: str) -> List[CartLine]:
    lines = view_cart(shopper)
    remaining = [line for line in lines if line.product_id != product_id]
    if len(remaining) == len(lines):
        return lines

    _save_cart(db, shopper, remaining)
    return remaining
