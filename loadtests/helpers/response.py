"""Response error extraction for load test observability.

Parses Orders API error responses into human-readable messages.
Handles the response shapes the service produces:

- Domain and validation errors (400/404/409/500): {"error": "msg"} or {"error": {"field": ["msg"]}}
- Framework errors such as unknown routes: {"detail": "Not Found"}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def is_stock_refusal(response: Response) -> bool:
    """True for the 400 the service returns when a product is short of stock."""
    if response.status_code != 400:
        return False
    try:
        error = response.json().get("error")
    except ValueError:
        return False
    return isinstance(error, dict) and any(
        "not available in quantity requested" in message for message in error.get("quantity", [])
    )


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON: return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            return " | ".join(
                f"{k}: {', '.join(v) if isinstance(v, list) else v}" for k, v in error.items()
            )
        return str(error)

    if "detail" in body:
        return str(body["detail"])

    # Unknown shape: stringify and truncate
    return str(body)[:300]
