"""
Seed script -- populates the database with development data.

Run with:
    python -m storefront.seed
or, through the Flask CLI:
    flask --app storefront.app seed-db

Idempotent: categories, products and the demo user are only inserted when
missing, so running it twice leaves the same data behind.
"""

import click
from sqlalchemy import text

from storefront.core.config import Config
from storefront.core.dependencies import DependencyContainer, build_container
from storefront.core.security import PasswordHasher
from storefront.db.database import Database

CATEGORIES = ["Electronics", "Clothing", "Books"]

PRODUCTS = [
    {
        "name": "ProBook Laptop 15",
        "description": "15-inch laptop, 16 GB RAM, 512 GB SSD.",
        "price_cents": 129999,
        "stock": 25,
        "category": "Electronics",
    },
    {
        "name": "SmartPhone X12",
        "description": "Flagship smartphone with 6.7-inch display.",
        "price_cents": 79999,
        "stock": 50,
        "category": "Electronics",
    },
    {
        "name": "Classic Cotton T-Shirt",
        "description": "100% organic cotton, unisex fit.",
        "price_cents": 2999,
        "stock": 150,
        "category": "Clothing",
    },
    {
        "name": "Flask Web Development",
        "description": "Building web applications with Python and Flask.",
        "price_cents": 3999,
        "stock": 200,
        "category": "Books",
    },
]

DEMO_USER_EMAIL = "demo@storefront.dev"
DEMO_USER_PASSWORD = "demo-password"


def seed(container: DependencyContainer) -> None:
    db = container.get(Database)
    hasher = container.get(PasswordHasher)

    with db.transaction() as conn:
        for name in CATEGORIES:
            conn.execute(
                text(
                    "INSERT INTO categories (name) VALUES (:name) "
                    "ON CONFLICT (name) DO NOTHING"
                ),
                {"name": name},
            )
        click.echo("  [+] Categories seeded")

        for p in PRODUCTS:
            existing = conn.execute(
                text("SELECT id FROM products WHERE name = :name"),
                {"name": p["name"]},
            ).first()
            if existing:
                continue

            cat_row = conn.execute(
                text("SELECT id FROM categories WHERE name = :name"),
                {"name": p["category"]},
            ).mappings().first()

            conn.execute(
                text(
                    "INSERT INTO products (name, description, price_cents, stock, category_id) "
                    "VALUES (:name, :desc, :price, :stock, :cat_id)"
                ),
                {"name": p["name"], "desc": p["description"], "price": p["price_cents"],
                 "stock": p["stock"], "cat_id": cat_row["id"]},
            )
            click.echo(f"  [+] Product: {p['name']}")

        conn.execute(
            text(
                "INSERT INTO users (email, hashed_password) VALUES (:email, :pw) "
                "ON CONFLICT (email) DO NOTHING"
            ),
            {"email": DEMO_USER_EMAIL, "pw": hasher.hash(DEMO_USER_PASSWORD)},
        )
        click.echo(f"  [+] Demo user: {DEMO_USER_EMAIL}")


def main() -> None:
    config = Config()
    config.validate()
    container = build_container(config)
    db = container.get(Database)
    db.create_schema()
    try:
        seed(container)
        click.echo("Done.")
    finally:
        db.dispose()


if __name__ == "__main__":
    main()
