# backend/routes/products.py
import base64
import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from database import get_db
from models.customer import ROLE_ADMIN
from models.product import Product, PRODUCTS_PARTITION
from schemas.product import ProductList, ProductOut, ProductPayload, ProductStored
from utils.errors import NotFound
from utils.functions_client import functions_client
from utils.tokenJWT import role_required

router = APIRouter(prefix="/products", tags=["Products"])
logger = logging.getLogger(__name__)


def _product_to_out(product: Product) -> ProductOut:
    return ProductOut(
        id=product.row_key,
        product_name=product.product_name,
        price=product.price,
        quantity=product.quantity,
        image_url=product.image_url or "",
        created_date=product.created_date,
    )


# Inline an uploaded image as a data URI for the StoreProduct function
def _to_data_uri(content: bytes, content_type: Optional[str]) -> str:
    subtype = (content_type or "image/png").split("/")[-1]
    return f"data:image/{subtype};base64,{base64.b64encode(content).decode('ascii')}"


# =========================
# PRODUCT LIST
# =========================
@router.get("", response_model=ProductList)
def list_products(db: Session = Depends(get_db)):
    items = (
        db.query(Product)
        .filter(Product.partition_key == PRODUCTS_PARTITION)
        .order_by(Product.product_name.asc())
        .all()
    )
    return ProductList(items=[_product_to_out(p) for p in items], total=len(items))


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = db.get(Product, (PRODUCTS_PARTITION, product_id))
    if not product:
        raise NotFound("Product not found")
    return _product_to_out(product)


# =========================
# ADD PRODUCT (Admin only)
# =========================
@router.post("", response_model=ProductStored, status_code=status.HTTP_201_CREATED)
async def add_product(
    product_name: str = Form(..., min_length=1),
    price: float = Form(..., ge=0),
    quantity: int = Form(..., ge=0),
    file: Optional[UploadFile] = File(None),
    _admin=Depends(role_required(ROLE_ADMIN)),
):
    image_url = ""
    if file is not None and file.filename:
        content = await file.read()
        if content:
            image_url = _to_data_uri(content, file.content_type)

    payload = ProductPayload(product_name=product_name, price=price, quantity=quantity, image_url=image_url)
    message = await functions_client.store_product(payload)

    logger.info(f"Product {payload.row_key} ({product_name}) submitted")
    return ProductStored(message=message)
