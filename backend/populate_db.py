import os
import uuid
from datetime import datetime

from sqlalchemy.orm import Session

from database import SessionLocal, init_db
from models.customer import CustomerProfile, CUSTOMERS_PARTITION, ROLE_ADMIN
from models.product import Product, PRODUCTS_PARTITION
from utils.hashing import get_password_hash

# Configuration
ADMIN_EMAIL = "admin@abcretail.com"
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

DEMO_PRODUCTS = [
    # (name, price, quantity)
    ("Classic Denim Jacket", 59.99, 25),
    ("Linen Summer Shirt", 29.50, 40),
    ("Leather Ankle Boots", 89.00, 12),
    ("Wool Knit Scarf", 19.99, 60),
    ("Canvas Tote Bag", 14.25, 80),
]
# End Configuration


def seed(db: Session) -> dict:
    """Create the admin profile and demo products that are missing. Safe to rerun."""
    created = {"admins": 0, "products": 0}

    if not db.get(CustomerProfile, (CUSTOMERS_PARTITION, ADMIN_EMAIL)):
        db.add(CustomerProfile(
            partition_key=CUSTOMERS_PARTITION,
            row_key=ADMIN_EMAIL,
            name="Store",
            surname="Admin",
            email=ADMIN_EMAIL,
            password_hash=get_password_hash(ADMIN_PASSWORD),
            role=ROLE_ADMIN,
            created_date=datetime.utcnow(),
        ))
        created["admins"] += 1

    existing = {
        name for (name,) in db.query(Product.product_name).filter(Product.partition_key == PRODUCTS_PARTITION)
    }
    for name, price, quantity in DEMO_PRODUCTS:
        if name in existing:
            continue
        db.add(Product(
            partition_key=PRODUCTS_PARTITION,
            row_key=str(uuid.uuid4()),
            product_name=name,
            price=price,
            quantity=quantity,
            image_url="",
            created_date=datetime.utcnow(),
        ))
        created["products"] += 1

    db.commit()
    return created


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        result = seed(session)
        print(f"Seeded {result['admins']} admin(s) and {result['products']} product(s).")
    finally:
        session.close()
