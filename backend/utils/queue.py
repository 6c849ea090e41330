# backend/utils/queue.py
from typing import List
from sqlalchemy.orm import Session
from models.queue import QueueMessage

ORDERS_QUEUE = "ordersqueue"


class QueueClient:
    """Named FIFO queue stored in the queue_messages table."""

    def __init__(self, db: Session, queue_name: str):
        self.db = db
        self.queue_name = queue_name

    def send_message(self, body: str) -> QueueMessage:
        message = QueueMessage(queue_name=self.queue_name, body=body)
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def receive_messages(self, max_messages: int = 32) -> List[QueueMessage]:
        return (
            self.db.query(QueueMessage)
            .filter(QueueMessage.queue_name == self.queue_name)
            .order_by(QueueMessage.id.asc())
            .limit(max_messages)
            .all()
        )

    def delete_message(self, message: QueueMessage) -> None:
        self.db.delete(message)
        self.db.commit()
