# backend/models/queue.py
from sqlalchemy import Column, Integer, String, DateTime, Text, func
from database import Base

# A message waiting on a named queue; deleted once a worker handled it
class QueueMessage(Base):
    __tablename__ = "queue_messages"

    id = Column(Integer, primary_key=True, index=True)
    queue_name = Column(String, nullable=False, index=True)
    body = Column(Text, nullable=False)
    inserted_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
