"""Seeds a fresh database with the admin account, menu categories, a starter
menu and the default store settings. Safe to run more than once."""
import os
import sys

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from config import settings
from database import SessionLocal, init_db
from models.menu import Category, MenuItem
from models.users import User
from services.settings_store import get_or_create_settings_row
from utils.hashing import get_password_hash

CATEGORIES = [
    {"name": "Burgers", "slug": "burgers", "display_order": 1},
    {"name": "Pizza", "slug": "pizza", "display_order": 2},
    {"name": "Sides", "slug": "sides", "display_order": 3},
    {"name": "Drinks", "slug": "drinks", "display_order": 4},
    {"name": "Desserts", "slug": "desserts", "display_order": 5},
]

MENU = [
    {
        "name": "The Smoky Texas Stack",
        "description": "Flame-grilled beef, smoked cheddar, crispy onions and BBQ sauce.",
        "price": 16.50,
        "category": "burgers",
        "popular": True,
        "variants": [
            {"id": "single", "name": "Single Patty", "price": 14.50},
            {"id": "double", "name": "Double Patty", "price": 16.50},
        ],
        "addons": [
            {"id": "cheese", "name": "Extra Cheese", "price": 1.50},
            {"id": "bacon", "name": "Bacon", "price": 2.00},
        ],
    },
    {
        "name": "Classic Chicken Burger",
        "description": "Buttermilk fried chicken, slaw and pickles.",
        "price": 12.00,
        "category": "burgers",
        "addons": [{"id": "jalapenos", "name": "Jalapenos", "price": 0.75}],
    },
    {
        "name": "Margherita",
        "description": "Tomato, mozzarella and basil.",
        "price": 11.00,
        "category": "pizza",
        "popular": True,
        "variants": [
            {"id": "medium", "name": "Medium", "price": 11.00},
            {"id": "large", "name": "Large", "price": 14.00},
        ],
    },
    {"name": "Loaded Fries", "price": 6.50, "category": "sides",
     "addons": [{"id": "cheese-sauce", "name": "Cheese Sauce", "price": 1.00}]},
    {"name": "Onion Rings", "price": 4.50, "category": "sides"},
    {"name": "Lemonade", "price": 3.00, "category": "drinks"},
    {"name": "Chocolate Brownie", "price": 5.50, "category": "desserts"},
]


def seed_admin(session):
    admin = session.query(User).filter(User.email == settings.ADMIN_EMAIL.lower()).first()
    if admin:
        return admin
    admin = User(
        email=settings.ADMIN_EMAIL.lower(),
        password_hash=get_password_hash(settings.ADMIN_PASSWORD),
        role="admin",
        first_name="Restaurant",
        last_name="Admin",
    )
    session.add(admin)
    print(f"Created admin account {admin.email}")
    return admin


def seed_categories(session):
    for data in CATEGORIES:
        if not session.query(Category).filter(Category.slug == data["slug"]).first():
            session.add(Category(**data))


def seed_menu(session):
    for data in MENU:
        if not session.query(MenuItem).filter(MenuItem.name == data["name"]).first():
            session.add(MenuItem(**data))


def main():
    init_db()
    session = SessionLocal()
    try:
        seed_admin(session)
        seed_categories(session)
        seed_menu(session)
        session.commit()
        get_or_create_settings_row(session)
        print("Database seeded.")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
