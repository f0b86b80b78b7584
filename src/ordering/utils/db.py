from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from ordering.store.tables import metadata


def _engine_for(target: Engine | str) -> Engine:
    return create_engine(target) if isinstance(target, str) else target


def setup_db(target: Engine | str):
    """Setup database schema"""
    metadata.create_all(_engine_for(target))


def drop_db(target: Engine | str):
    """Drop database schema"""
    metadata.drop_all(_engine_for(target))
