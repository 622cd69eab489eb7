"""Sample data for a fresh database and for the offline client store.

Run ``python -m easymart.seed`` to create the tables and load the samples.
"""
import logging

from sqlmodel import Session, select

from .models import Product, User, UserRole

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    {"name": "Laptop", "sku": "LAPTOP-001", "category": "Electronics",
     "price": 999.99, "cost_price": 500, "stock_quantity": 15, "reorder_level": 5},
    {"name": "Wireless Mouse", "sku": "MOUSE-001", "category": "Accessories",
     "price": 29.99, "cost_price": 10, "stock_quantity": 50, "reorder_level": 20},
    {"name": "USB-C Cable", "sku": "CABLE-001", "category": "Cables",
     "price": 14.99, "cost_price": 5, "stock_quantity": 100, "reorder_level": 30},
    {"name": "Monitor 27\"", "sku": "MONITOR-001", "category": "Electronics",
     "price": 299.99, "cost_price": 150, "stock_quantity": 8, "reorder_level": 3},
    {"name": "Keyboard Mechanical", "sku": "KEYBOARD-001", "category": "Accessories",
     "price": 89.99, "cost_price": 40, "stock_quantity": 25, "reorder_level": 10},
    {"name": "Webcam HD", "sku": "WEBCAM-001", "category": "Electronics",
     "price": 59.99, "cost_price": 25, "stock_quantity": 32, "reorder_level": 10},
    {"name": "USB Hub", "sku": "HUB-001", "category": "Accessories",
     "price": 39.99, "cost_price": 15, "stock_quantity": 45, "reorder_level": 15},
    {"name": "Desk Lamp LED", "sku": "LAMP-001", "category": "Furniture",
     "price": 44.99, "cost_price": 20, "stock_quantity": 2, "reorder_level": 5},
]

SAMPLE_USERS = [
    {"username": "admin", "password": "admin123", "role": UserRole.MANAGER,
     "name": "Admin User", "email": "admin@easymart.com"},
    {"username": "cashier1", "password": "pass123", "role": UserRole.CASHIER,
     "name": "John Doe", "email": "john@easymart.com"},
    {"username": "cashier2", "password": "pass123", "role": UserRole.CASHIER,
     "name": "Jane Smith", "email": "jane@easymart.com"},
    {"username": "manager1", "password": "pass123", "role": UserRole.MANAGER,
     "name": "Mike Johnson", "email": "mike@easymart.com"},
]


def seed_database(session: Session) -> bool:
    """Load the sample users and products unless the database has data.

    Returns True when anything was inserted.
    """
    if session.exec(select(Product)).first() or session.exec(select(User)).first():
        logger.info("Database already has data, skipping seed")
        return False

    for user in SAMPLE_USERS:
        session.add(User(**user))
    for product in SAMPLE_PRODUCTS:
        session.add(Product(**product))
    session.commit()

    logger.info("Added %d users", len(SAMPLE_USERS))
    logger.info("Added %d products", len(SAMPLE_PRODUCTS))
    return True


if __name__ == "__main__":
    from .database import create_db_and_tables, engine

    logging.basicConfig(level=logging.INFO)
    create_db_and_tables()
    with Session(engine) as session:
        seed_database(session)
