import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config environment and make sure every test starts from the
    in-memory store unless it installs another one itself.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("ORDERS_STORE", "memory")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture()
def storage():
    """A fresh in-memory storage installed as the active one."""
    from ordering.store import reset_storage, set_storage
    from ordering.store.memory_adapter import MemoryStorage

    store = MemoryStorage()
    set_storage(store)
    yield store
    reset_storage()


@pytest.fixture(autouse=True)
def run_around_tests(storage):
    """Fixture to give every test its own empty store"""
    yield


@pytest.fixture()
def add_product(storage):
    """Insert a product and return it."""

    def _add(**overrides):
        defaults = {"name": "Widget", "price": 10.0, "quantity": 5, "category": "tools"}
        defaults.update(overrides)
        return storage.atomic(lambda stores: stores.products.add(**defaults))

    return _add


@pytest.fixture()
def add_order(storage):
    """Insert an empty order and return it."""

    def _add(user_id=1, status="new"):
        return storage.atomic(lambda stores: stores.orders.add(user_id=user_id, status=status))

    return _add
