"""Pydantic request/response schemas for the Orders API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Request fields are loose; range and choice checks
happen in the commands and surface as 400s.
"""

from datetime import datetime

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    user_id: int | None = None
    status: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": 1,
                    "status": "new",
                }
            ]
        }
    }


class UpdateOrderRequest(BaseModel):
    user_id: int | None = None
    status: str | None = None


class AddOrderItemRequest(BaseModel):
    product_id: int | None = None
    quantity: int | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": 7,
                    "quantity": 3,
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: int


class ItemCreatedResponse(BaseModel):
    msg: str = "Created successfully"
    item_id: int


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderItemResponse(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: float
    subtotal: float
    created_at: datetime | None = None


class OrderResponse(BaseModel):
    id: int
    user_id: int
    total: float
    status: str
    created_at: datetime | None = None


class OrderDetailResponse(OrderResponse):
    items: list[OrderItemResponse] = []
