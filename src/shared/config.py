"""Environment-driven settings shared by the orders service, its CLI and load tests.

Every value is read from the process environment with the same defaults the
services have always shipped with, so a bare checkout talks to a local
PostgreSQL on 5432 and to sibling services on ports 8080-8084.
"""

import os
from dataclasses import dataclass

STORE_MEMORY = "memory"
STORE_SQLALCHEMY = "sqlalchemy"


def _env(key: str, fallback: str) -> str:
    value = os.getenv(key)
    return value if value is not None else fallback


def _env_int(key: str, fallback: int) -> int:
    value = os.getenv(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass(frozen=True)
class Settings:
    environment: str
    store_backend: str
    database_uri: str
    orders_port: int
    base_url: str
    users_url: str
    products_url: str
    orders_url: str
    payments_url: str

    @classmethod
    def from_env(cls) -> "Settings":
        environment = (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()

        database_uri = os.getenv("DATABASE_URI")
        if not database_uri:
            database_uri = "postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}".format(
                user=_env("DB_USER", "root"),
                password=_env("DB_PASSWORD", "mypassword"),
                host=_env("DB_HOST", "127.0.0.1"),
                port=_env_int("DB_PORT", 5432),
                name=_env("DB_NAME", "ecom"),
            )

        store_backend = _env("ORDERS_STORE", STORE_MEMORY).lower()
        if store_backend not in (STORE_MEMORY, STORE_SQLALCHEMY):
            raise ValueError(f"ORDERS_STORE must be '{STORE_MEMORY}' or '{STORE_SQLALCHEMY}', got '{store_backend}'")

        return cls(
            environment=environment,
            store_backend=store_backend,
            database_uri=database_uri,
            orders_port=_env_int("ORDERS_PORT", 8083),
            base_url=_env("BASE_URL", "http://localhost:8080/"),
            users_url=_env("USERS_URL", "http://localhost:8081/"),
            products_url=_env("PRODUCTS_URL", "http://localhost:8082/"),
            orders_url=_env("ORDERS_URL", "http://localhost:8083/"),
            payments_url=_env("PAYMENTS_URL", "http://localhost:8084/"),
        )

    def service_url(self, service: str, *path) -> str:
        """Build an absolute URL for ``service`` from its configured base.

        Pure: the base URL is read, never reassigned, so concurrent requests
        cannot observe each other's paths.
        """
        bases = {
            "gateway": self.base_url,
            "users": self.users_url,
            "products": self.products_url,
            "orders": self.orders_url,
            "payments": self.payments_url,
        }
        try:
            base = bases[service]
        except KeyError:
            raise ValueError(f"Unknown service: {service}") from None

        segments = [str(segment).strip("/") for segment in path]
        return base.rstrip("/") + "/" + "/".join(segment for segment in segments if segment)


def load_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings.from_env()
