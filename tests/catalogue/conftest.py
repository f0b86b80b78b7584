import os

import pytest


@pytest.fixture(scope="session")
def _catalogue_domain(request):
    """Initialize the catalogue domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from catalogue.domain import catalogue

    catalogue.init()
    return catalogue


@pytest.fixture(autouse=True)
def _ctx(_catalogue_domain):
    """Push domain context before each test."""
    with _catalogue_domain.domain_context():
        yield
