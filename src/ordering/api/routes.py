"""FastAPI routes for the Ordering domain: orders and their items."""

from fastapi import APIRouter, Response
from protean.utils.globals import current_domain
from shared.config import load_settings

from ordering.api.schemas import (
    AddOrderItemRequest,
    CreateOrderRequest,
    ItemCreatedResponse,
    OrderDetailResponse,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    StatusResponse,
    UpdateOrderRequest,
)
from ordering.order.creation import CreateOrder
from ordering.order.items import AddOrderItem
from ordering.order.modification import DeleteOrder, UpdateOrder
from ordering.order.queries import get_order, list_orders, search_orders

order_router = APIRouter(prefix="/orders", tags=["orders"])


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        total=order.total,
        status=order.status,
        created_at=order.created_at,
    )


def _item_response(item) -> OrderItemResponse:
    return OrderItemResponse(
        id=item.id,
        order_id=item.order_id,
        product_id=item.product_id,
        quantity=item.quantity,
        price=item.price,
        subtotal=item.subtotal,
        created_at=item.created_at,
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@order_router.get("", response_model=list[OrderResponse])
async def get_orders() -> list[OrderResponse]:
    return [_order_response(order) for order in list_orders()]


@order_router.get("/search", response_model=list[OrderResponse])
async def find_orders(status: str | None = None, user: int | None = None) -> list[OrderResponse]:
    """Search by status, or by user when no status is given."""
    return [_order_response(order) for order in search_orders(status=status, user_id=user)]


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order_detail(order_id: int) -> OrderDetailResponse:
    order, items = get_order(order_id)
    return OrderDetailResponse(
        **_order_response(order).model_dump(),
        items=[_item_response(item) for item in items],
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def create_order(body: CreateOrderRequest, response: Response) -> OrderIdResponse:
    command = CreateOrder(**body.model_dump(exclude_none=True))
    order_id = current_domain.process(command, asynchronous=False)
    response.headers["Location"] = load_settings().service_url("orders", "orders", order_id)
    return OrderIdResponse(order_id=order_id)


@order_router.put("/{order_id}", response_model=StatusResponse)
async def update_order(order_id: int, body: UpdateOrderRequest) -> StatusResponse:
    command = UpdateOrder(order_id=order_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: int) -> StatusResponse:
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/order", status_code=201, response_model=ItemCreatedResponse)
async def add_order_item(order_id: int, body: AddOrderItemRequest) -> ItemCreatedResponse:
    """Reserve stock and add a product line to the order."""
    command = AddOrderItem(
        order_id=order_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    item_id = current_domain.process(command, asynchronous=False)
    return ItemCreatedResponse(item_id=item_id)
