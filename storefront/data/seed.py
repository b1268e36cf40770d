# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db
from storefront.data.models import ProductModel, UserModel

PRODUCTS = [
    {"title": "Watch", "brand": "Fossil", "model": "FH256", "description": "Good watch for men!",
     "condition": "Mint", "finish": "Black", "price": Decimal("100.00")},
    {"title": "Car", "brand": "Opel", "model": "Corsa", "description": "Cool red car",
     "condition": "Excellent", "finish": "Red", "price": Decimal("15000.00")},
    {"title": "Car", "brand": "Ferrari", "model": "F12", "description": "Cool sports car",
     "condition": "New", "finish": "Red", "price": Decimal("250000.00")},
    {"title": "Laptop", "brand": "Lenovo", "model": "ThinkPad X1", "description": "Light business laptop",
     "condition": "Used", "finish": "Black", "price": Decimal("899.00")},
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return
        user = db.get(UserModel, 1) or UserModel(id=1, name="Random User")
        db.add(user)
        db.add_all(ProductModel(owner=user, **data) for data in PRODUCTS)
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
