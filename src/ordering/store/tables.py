"""Relational schema shared by the products and orders services.

Column names follow the existing database (``userid``, ``orderid``,
``productid``). Line items reference orders and products by id only; no
foreign keys are declared.
"""

from sqlalchemy import Column, DateTime, Float, Index, Integer, MetaData, String, Table, Text, func

metadata = MetaData()

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("price", Float, nullable=False),
    Column("category", String(255)),
    Column("quantity", Integer, nullable=False, server_default="0"),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("userid", Integer, nullable=False),
    Column("total", Float, nullable=False, server_default="0"),
    Column("status", String(20), nullable=False, server_default="new"),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

order_items = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("orderid", Integer, nullable=False),
    Column("productid", Integer, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("price", Float, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Index("ix_order_items_orderid", "orderid"),
)
