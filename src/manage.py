"""Orders service database management CLI.

Creates and drops the ``products``, ``orders`` and ``order_items`` tables and
loads a handful of demo products. The database is taken from DATABASE_URI or
the DB_* variables unless ``--database-uri`` is given.

Usage:
    python src/manage.py setup-db        # Create all tables
    python src/manage.py drop-db         # Drop all tables
    python src/manage.py seed-products   # Insert demo products (skips existing names)
"""

import argparse
import sys

DEMO_PRODUCTS = [
    {"name": "Mechanical Keyboard", "price": 89.0, "quantity": 50, "category": "peripherals"},
    {"name": "Wireless Mouse", "price": 29.5, "quantity": 120, "category": "peripherals"},
    {"name": "27in Monitor", "price": 249.0, "quantity": 15, "category": "displays"},
    {"name": "USB-C Hub", "price": 39.9, "quantity": 80, "category": "accessories"},
    {"name": "Laptop Stand", "price": 45.0, "quantity": 5, "category": "accessories"},
]


def _database_uri(override=None):
    from shared.config import load_settings

    return override or load_settings().database_uri


def setup_database(database_uri=None):
    """Create every table the orders service uses."""
    from ordering.utils.db import setup_db

    print("Creating orders database schema...")
    setup_db(_database_uri(database_uri))
    print("Done.")


def drop_database(database_uri=None):
    """Drop every table the orders service uses."""
    from ordering.utils.db import drop_db

    print("Dropping orders database schema...")
    drop_db(_database_uri(database_uri))
    print("Done.")


def seed_products(database_uri=None, storage=None):
    """Insert the demo products that are not already present by name."""
    from ordering.store.sql_adapter import SqlStorage

    storage = storage or SqlStorage.from_url(_database_uri(database_uri))

    def work(stores):
        created = 0
        for product in DEMO_PRODUCTS:
            if stores.products.filter(name=product["name"]):
                continue
            stores.products.add(**product)
            created += 1
        return created

    created = storage.atomic(work)
    print(f"Seeded {created} product(s).")
    return created


def main(argv=None):
    parser = argparse.ArgumentParser(description="Orders service database management")
    parser.add_argument("--database-uri", help="SQLAlchemy URL (default: from environment)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-products", help="Insert demo products")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database(args.database_uri)
    elif args.command == "drop-db":
        drop_database(args.database_uri)
    elif args.command == "seed-products":
        seed_products(args.database_uri)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
