"""Storefront database management CLI.

Usage:
    storefront-manage setup-db   # Create all tables
    storefront-manage drop-db    # Drop all tables
    storefront-manage seed       # Load demo users, categories and products
"""

import argparse
import json
import sys

from protean.utils.globals import current_domain

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_USERS = [
    {"external_id": "demo|admin", "email": "admin@ecommerce.com", "name": "Admin User", "role": "ADMIN"},
    {"external_id": "demo|john", "email": "john.doe@example.com", "name": "John Doe", "role": "CUSTOMER"},
    {"external_id": "demo|jane", "email": "jane.smith@example.com", "name": "Jane Smith", "role": "CUSTOMER"},
]

DEMO_CATEGORIES = [
    {"name": "Electronics", "slug": "electronics", "description": "Electronic devices and gadgets"},
    {"name": "Smartphones", "slug": "smartphones", "description": "Latest smartphones", "parent": "electronics"},
    {"name": "Laptops", "slug": "laptops", "description": "Laptops and portable computers", "parent": "electronics"},
    {"name": "Clothing", "slug": "clothing", "description": "Fashion and apparel"},
    {"name": "Men's Clothing", "slug": "mens-clothing", "description": "Clothing for men", "parent": "clothing"},
]

DEMO_PRODUCTS = [
    {
        "name": "iPhone 15 Pro",
        "slug": "iphone-15-pro",
        "description": "Titanium design with the A17 Pro chip.",
        "price": 999.99,
        "compare_price": 1099.99,
        "sku": "IPHONE15PRO",
        "stock": 50,
        "is_featured": True,
        "category": "smartphones",
        "images": [{"url": "https://images.unsplash.com/photo-1592750475338-74b7b21085ab?w=500"}],
        "variants": [
            {"name": "Storage", "value": "128GB", "price": 999.99, "stock": 20, "sku": "IPHONE15PRO-128"},
            {"name": "Storage", "value": "256GB", "price": 1099.99, "stock": 15, "sku": "IPHONE15PRO-256"},
        ],
    },
    {
        "name": "Samsung Galaxy S24 Ultra",
        "slug": "samsung-galaxy-s24-ultra",
        "description": "Galaxy AI and a built-in S Pen.",
        "price": 1199.99,
        "compare_price": 1299.99,
        "sku": "GALAXYS24ULTRA",
        "stock": 30,
        "is_featured": True,
        "category": "smartphones",
        "images": [{"url": "https://images.unsplash.com/photo-1610945265064-0e34e5519bbf?w=500"}],
        "variants": [],
    },
    {
        "name": "MacBook Pro 16-inch M3",
        "slug": "macbook-pro-16-m3",
        "description": "M3 Pro chip for demanding workflows.",
        "price": 2499.99,
        "compare_price": 2699.99,
        "sku": "MBP16M3",
        "stock": 20,
        "is_featured": True,
        "category": "laptops",
        "images": [{"url": "https://images.unsplash.com/photo-1517336714731-489689fd1ca8?w=500"}],
        "variants": [{"name": "Memory", "value": "18GB", "price": 2499.99, "stock": 10}],
    },
    {
        "name": "Classic Denim Jacket",
        "slug": "classic-denim-jacket",
        "description": "A timeless denim jacket.",
        "price": 89.99,
        "compare_price": 120.0,
        "sku": "DENIMJACKET",
        "stock": 8,
        "is_featured": False,
        "category": "mens-clothing",
        "images": [],
        "variants": [],
    },
]


def _domain():
    from storefront.domain import init_domain

    return init_domain()


def setup_databases():
    from storefront.utils.db import setup_db

    domain = _domain()
    print("Creating storefront database schema...")
    providers = setup_db(domain)
    print(f"  schema ready on: {', '.join(providers) or 'no SQL providers'}")


def drop_databases():
    from storefront.utils.db import drop_db

    domain = _domain()
    print("Dropping storefront database schema...")
    providers = drop_db(domain)
    print(f"  schema dropped on: {', '.join(providers) or 'no SQL providers'}")


def seed():
    """Load demo data through the same commands the API uses."""
    from storefront.catalogue.management import CreateCategory, CreateProduct
    from storefront.identity.registration import RegisterUser

    domain = _domain()
    with domain.domain_context():
        for user in DEMO_USERS:
            current_domain.process(RegisterUser(**user), asynchronous=False)

        category_ids = {}
        for category in DEMO_CATEGORIES:
            parent = category.get("parent")
            category_ids[category["slug"]] = current_domain.process(
                CreateCategory(
                    name=category["name"],
                    slug=category["slug"],
                    description=category["description"],
                    parent_id=category_ids[parent] if parent else None,
                ),
                asynchronous=False,
            )

        for product in DEMO_PRODUCTS:
            data = {k: v for k, v in product.items() if k not in ("category", "images", "variants")}
            current_domain.process(
                CreateProduct(
                    **data,
                    category_id=category_ids[product["category"]],
                    images=json.dumps(product["images"]),
                    variants=json.dumps(product["variants"]),
                ),
                asynchronous=False,
            )

    logger.info(
        "demo_data_seeded",
        users=len(DEMO_USERS),
        categories=len(DEMO_CATEGORIES),
        products=len(DEMO_PRODUCTS),
    )
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Load demo users, categories and products")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "seed":
        seed()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
