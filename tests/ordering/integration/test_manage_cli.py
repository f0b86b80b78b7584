"""Integration tests for the database management CLI against SQLite."""

import manage
import pytest
from ordering.store.sql_adapter import SqlStorage
from sqlalchemy import inspect


@pytest.fixture()
def database_uri(tmp_path):
    return f"sqlite:///{tmp_path / 'manage.db'}"


class TestSchemaCommands:
    def test_setup_db_creates_tables(self, database_uri):
        manage.main(["--database-uri", database_uri, "setup-db"])
        storage = SqlStorage.from_url(database_uri)
        assert set(inspect(storage.engine).get_table_names()) == {"products", "orders", "order_items"}

    def test_drop_db_removes_tables(self, database_uri):
        manage.main(["--database-uri", database_uri, "setup-db"])
        manage.main(["--database-uri", database_uri, "drop-db"])
        storage = SqlStorage.from_url(database_uri)
        assert inspect(storage.engine).get_table_names() == []


class TestSeedProducts:
    def test_seeds_demo_products_once(self, database_uri):
        manage.setup_database(database_uri)

        assert manage.seed_products(database_uri) == len(manage.DEMO_PRODUCTS)
        assert manage.seed_products(database_uri) == 0

        storage = SqlStorage.from_url(database_uri)
        products = storage.atomic(lambda stores: stores.products.filter())
        assert [p.name for p in products] == [p["name"] for p in manage.DEMO_PRODUCTS]
