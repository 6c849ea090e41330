# backend/functions/order_queue.py
"""Worker for the ordersqueue queue.

Each message is an order (the StoreCustomerOrder wire format) whose
OrderStatus should be applied to the stored order. Run with
``python -m functions.order_queue`` from the backend directory.
"""
import logging
import time

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from database import SessionLocal, init_db
from models.order import Order, ORDERS_PARTITION
from schemas.order import OrderPayload
from utils.errors import StorageFailure
from utils.order_lifecycle import order_backup_name
from utils.queue import QueueClient, ORDERS_QUEUE
from utils.storage import BlobContainer, ORDER_FILES

logger = logging.getLogger(__name__)


def process_order_message(db: Session, message: str) -> bool:
    """Apply one queued status update. Failures are logged and the message dropped."""
    logger.info(f"Processing message from {ORDERS_QUEUE}: {message}")

    try:
        order = OrderPayload.model_validate_json(message)
    except ValidationError as e:
        logger.error(f"Error processing order from {ORDERS_QUEUE}: {e}")
        return False

    if not settings.TABLE_STORAGE_URL or not settings.BLOB_STORAGE_ROOT:
        logger.error("Connection strings are missing.")
        return False

    entity = db.get(Order, (ORDERS_PARTITION, order.order_id))
    if entity is None:
        logger.error(f"Error processing order from {ORDERS_QUEUE}: order {order.order_id} not found")
        return False

    entity.order_status = order.order_status
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error processing order from {ORDERS_QUEUE}: {e}")
        return False

    logger.info(f"Order {order.order_id} status updated to {order.order_status} in Table Storage.")

    customer_email = order.customer_email or entity.customer_email
    try:
        BlobContainer(ORDER_FILES).upload(
            order_backup_name(customer_email, order.order_id),
            message.encode("utf-8"),
        )
    except StorageFailure:
        return False

    logger.info(f"Order {order.order_id} ({order.order_status}) backup stored in Blob Storage.")
    return True


def drain_queue(db: Session, max_messages: int = 32) -> int:
    """Handle every pending message once; returns how many were consumed."""
    queue = QueueClient(db, ORDERS_QUEUE)
    handled = 0
    for message in queue.receive_messages(max_messages):
        try:
            process_order_message(db, message.body)
        except Exception:
            # A message that cannot be handled is consumed anyway
            db.rollback()
            logger.exception(f"Error processing order from {ORDERS_QUEUE}: {message.body}")
        queue.delete_message(message)
        handled += 1
    return handled


def main():
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    init_db()
    logger.info(f"Listening on {ORDERS_QUEUE}")
    while True:
        with SessionLocal() as db:
            handled = drain_queue(db)
        if not handled:
            time.sleep(settings.QUEUE_POLL_SECONDS)


if __name__ == "__main__":
    main()
