# backend/functions/app.py
import base64
import binascii
import logging
from datetime import datetime
from typing import Optional, Type, TypeVar

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from database import get_db, init_db
from models.customer import CustomerProfile
from models.order import Order
from models.product import Product
from schemas.order import OrderPayload
from schemas.product import ProductPayload, WireModel
from schemas.user import CustomerPayload
from utils.errors import ConfigurationError, ErrorKind, RetailError, StorageFailure, STATUS_BY_KIND
from utils.order_lifecycle import order_backup_name, products_to_json
from utils.storage import BlobContainer, PRODUCT_IMAGES, CUSTOMER_IMAGES, ORDER_FILES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Functions"])

P = TypeVar("P", bound=WireModel)

DATA_URI_PREFIX = "data:image/"


def _bad_request(kind: str) -> PlainTextResponse:
    return PlainTextResponse(f"Invalid {kind} data. Please provide all required fields.", status_code=400)


async def _read_payload(request: Request, schema: Type[P]) -> Optional[P]:
    try:
        return schema.model_validate_json(await request.body())
    except ValidationError:
        return None


def _check_configuration() -> None:
    if not settings.TABLE_STORAGE_URL or not settings.BLOB_STORAGE_ROOT:
        logger.error("Connection strings are missing.")
        raise ConfigurationError("Connection strings are missing.")


def _relocate_image(image_url: str, container_name: str, blob_name: str) -> str:
    """Upload an inline data:image/...;base64 image and return its blob URL.

    Any other value is returned unchanged.
    """
    if not image_url.startswith(DATA_URI_PREFIX):
        return image_url

    base64_data = image_url.split(",", 1)[-1]
    try:
        image_bytes = base64.b64decode(base64_data, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error(f"Error decoding image {blob_name}: {e}")
        raise StorageFailure(f"Image {blob_name} is not valid base64") from e

    return BlobContainer(container_name).upload(blob_name, image_bytes)


def _persist(db: Session, entity, kind: str) -> None:
    try:
        db.add(entity)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error storing {kind}: {e}")
        raise StorageFailure(f"Error storing {kind}") from e


@router.post("/StoreProduct")
async def store_product(request: Request, db: Session = Depends(get_db)):
    logger.info("Processing product creation request...")

    product = await _read_payload(request, ProductPayload)
    if product is None or not product.product_name:
        return _bad_request("product")

    if product.created_date is None:
        product.created_date = datetime.utcnow()

    _check_configuration()

    image_url = product.image_url or ""
    if image_url:
        image_url = _relocate_image(image_url, PRODUCT_IMAGES, f"{product.product_name}_productimage")

    _persist(db, Product(
        partition_key=product.partition_key,
        row_key=product.row_key,
        product_name=product.product_name,
        price=product.price,
        quantity=product.quantity,
        image_url=image_url,
        created_date=product.created_date,
    ), "product")

    summary = (f"{product.partition_key}, {product.row_key}, {product.product_name}, {product.price}, "
               f"{product.quantity}, {image_url}, {product.created_date}")
    logger.info(f"Product {summary} has been successfully stored.")
    return PlainTextResponse(f"Product {summary} has been stored successfully.")


@router.post("/StoreCustomerProfile")
async def store_customer_profile(request: Request, db: Session = Depends(get_db)):
    logger.info("Processing customer profile creation request...")

    customer = await _read_payload(request, CustomerPayload)
    if customer is None or not customer.email:
        return _bad_request("customer")

    if customer.created_date is None:
        customer.created_date = datetime.utcnow()

    _check_configuration()

    image_url = customer.image_url or ""
    if image_url:
        image_url = _relocate_image(image_url, CUSTOMER_IMAGES, f"{customer.email}_profileimage")

    row_key = customer.row_key or customer.email
    _persist(db, CustomerProfile(
        partition_key=customer.partition_key,
        row_key=row_key,
        name=customer.name or "",
        surname=customer.surname or "",
        email=customer.email,
        phone_number=customer.phone_number or "",
        password_hash=customer.password_hash or "",
        role=customer.role,
        image_url=image_url,
        created_date=customer.created_date,
    ), "customer profile")

    # The password hash is stored but never echoed
    summary = (f"{customer.partition_key}, {row_key}, {customer.name or ''}, {customer.surname or ''}, "
               f"{customer.email}, {customer.phone_number or ''}, {customer.role}, {image_url}, "
               f"{customer.created_date}")
    logger.info(f"Customer Profile: {summary} has been successfully stored.")
    return PlainTextResponse(f"Customer {summary} has been stored successfully.")


@router.post("/StoreCustomerOrder")
async def store_customer_order(request: Request, db: Session = Depends(get_db)):
    logger.info("Processing customer order creation request...")

    order = await _read_payload(request, OrderPayload)
    if order is None or not order.customer_email:
        return _bad_request("order")

    if order.date is None:
        order.date = datetime.utcnow()

    _check_configuration()

    entity = Order(
        row_key=order.order_id,
        customer_name=order.customer_name or "",
        customer_email=order.customer_email,
        customer_phone=order.customer_phone or "",
        products=products_to_json(order.products),
        total_amount=order.total_amount,
        order_status=order.order_status,
        date=order.date,
    )

    # Row and backup blob go in together: a failed backup rolls the row back
    try:
        db.add(entity)
        db.flush()
        BlobContainer(ORDER_FILES).upload(
            order_backup_name(order.customer_email, order.order_id),
            order.model_dump_json(by_alias=True).encode("utf-8"),
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error storing customer order: {e}")
        raise StorageFailure("Error storing customer order") from e
    except StorageFailure:
        db.rollback()
        raise

    logger.info(f"Order {order.order_id} for customer {order.customer_email} has been successfully stored and backed up.")

    summary = (f"{order.order_id}, {order.customer_name or ''}, {order.customer_phone or ''}, "
               f"{order.customer_email}, {len(order.products)} product(s), {order.total_amount}, "
               f"{order.date}, {order.order_status}")
    return PlainTextResponse(f"Order {summary} has been stored successfully.")


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    init_db()

    functions_app = FastAPI(title="ABC Retail Functions", version="1.0.0")

    @functions_app.exception_handler(RetailError)
    async def retail_error_handler(request: Request, exc: RetailError):
        status_code = STATUS_BY_KIND[exc.kind]
        if exc.kind == ErrorKind.VALIDATION:
            return PlainTextResponse(exc.message, status_code=status_code)
        return Response(status_code=status_code)

    functions_app.include_router(router)
    return functions_app


app = create_app()
