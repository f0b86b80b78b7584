"""Orders service FastAPI application.

Web server that processes order commands synchronously via HTTP. Each
``/orders`` request runs inside the ordering domain context with a request id
bound to every log line.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8083 --reload
"""

import uuid

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
from catalogue.domain import catalogue  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ordering.domain import ordering  # noqa: E402
from ordering.utils.logging import add_context, clear_context
from shared.config import load_settings

catalogue.init()
ordering.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/orders": ordering,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Orders API",
    description="E-commerce orders service: orders, line items and stock reservation",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is None:
        # No domain match: pass through (health check, docs, etc.)
        return await call_next(request)

    add_context(request_id=request.headers.get("X-Request-ID", str(uuid.uuid4())), path=request.url.path)
    try:
        with domain.domain_context():
            response = await call_next(request)
        return response
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ordering.api import order_router, register_error_handlers  # noqa: E402

app.include_router(order_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    settings = load_settings()
    return JSONResponse(
        content={
            "status": "ok",
            "environment": settings.environment,
            "store": settings.store_backend,
            "domains": {
                "catalogue": {"name": catalogue.name},
                "ordering": {"name": ordering.name},
            },
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=load_settings().orders_port)
