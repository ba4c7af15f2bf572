"""Signed-in shopper's dashboard."""

from fastapi import APIRouter, Depends

from storefront.access.context import Actor
from storefront.api.deps import require_actor
from storefront.api.schemas import CartTotals, DashboardResponse, OrderResponse, UserResponse
from storefront.cart.summary import cart_summary
from storefront.exceptions import Unauthenticated
from storefront.identity.registration import find_user
from storefront.order.queries import recent_orders

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def dashboard(actor: Actor = Depends(require_actor)) -> DashboardResponse:
    user = find_user(user_id=actor.user_id)
    if user is None:
        raise Unauthenticated("Session user no longer exists")

    summary = cart_summary(actor.user_id)
    return DashboardResponse(
        user=UserResponse.from_user(user),
        cart=CartTotals(subtotal=summary.subtotal, total_items=summary.total_items, item_count=summary.item_count),
        recent_orders=[OrderResponse.from_order(order) for order in recent_orders(actor.user_id)],
    )
