"""Order endpoints for shoppers."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.access.context import Actor
from storefront.api.deps import require_actor
from storefront.api.schemas import (
    OrderListResponse,
    OrderResponse,
    OrderStatusName,
    PlaceOrderRequest,
    UpdateOrderRequest,
)
from storefront.order.placement import PlaceOrder, place_order
from storefront.order.queries import USER_PAGE_SIZE, get_order, get_order_for_user, list_orders_for_user
from storefront.order.update import UpdateOrder
from storefront.utils.pagination import MAX_LIMIT

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: PlaceOrderRequest, actor: Actor = Depends(require_actor)) -> OrderResponse:
    shipping = body.shipping_address.model_dump()
    billing = body.billing_address.model_dump() if body.billing_address else shipping
    command = PlaceOrder(
        user_id=actor.user_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_address=json.dumps(shipping),
        billing_address=json.dumps(billing),
        payment_method=body.payment_method,
        subtotal=body.subtotal,
        tax_amount=body.tax_amount,
        shipping_amount=body.shipping_amount,
        total=body.total,
        notes=body.notes,
    )
    return OrderResponse.from_order(place_order(command))


@router.get("", response_model=OrderListResponse)
async def my_orders(
    status: OrderStatusName | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=USER_PAGE_SIZE, ge=1, le=MAX_LIMIT),
    actor: Actor = Depends(require_actor),
) -> OrderListResponse:
    return OrderListResponse.from_page(list_orders_for_user(actor.user_id, status=status, page=page, limit=limit))


@router.get("/{order_id}", response_model=OrderResponse)
async def order_detail(order_id: str, actor: Actor = Depends(require_actor)) -> OrderResponse:
    return OrderResponse.from_order(get_order_for_user(actor.user_id, order_id))


@router.patch("/{order_id}", response_model=OrderResponse)
async def update_order(order_id: str, body: UpdateOrderRequest, actor: Actor = Depends(require_actor)) -> OrderResponse:
    command = UpdateOrder(
        order_id=order_id,
        actor_id=actor.user_id,
        actor_role=actor.role,
        status=body.status,
        payment_status=body.payment_status,
        tracking_number=body.tracking_number,
    )
    current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(get_order(order_id))
