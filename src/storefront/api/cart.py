"""Cart endpoints: every response carries the full cart with freshly computed totals."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.access.context import Actor
from storefront.api.deps import require_actor
from storefront.api.schemas import AddToCartRequest, CartResponse, QuoteResponse, UpdateCartItemRequest
from storefront.cart.items import AddToCart, ClearCart, RemoveCartItem, UpdateCartItem
from storefront.cart.summary import cart_summary
from storefront.order.pricing import quote

router = APIRouter(prefix="/cart", tags=["cart"])


def _cart(user_id) -> CartResponse:
    return CartResponse.from_summary(cart_summary(user_id))


@router.get("", response_model=CartResponse)
async def get_cart(actor: Actor = Depends(require_actor)) -> CartResponse:
    return _cart(actor.user_id)


@router.get("/quote", response_model=QuoteResponse)
async def get_quote(actor: Actor = Depends(require_actor)) -> QuoteResponse:
    return QuoteResponse(**quote(cart_summary(actor.user_id).subtotal).to_dict())


@router.post("", status_code=201, response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, actor: Actor = Depends(require_actor)) -> CartResponse:
    command = AddToCart(user_id=actor.user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart(actor.user_id)


@router.put("/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str, body: UpdateCartItemRequest, actor: Actor = Depends(require_actor)
) -> CartResponse:
    command = UpdateCartItem(user_id=actor.user_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart(actor.user_id)


@router.delete("/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, actor: Actor = Depends(require_actor)) -> CartResponse:
    current_domain.process(RemoveCartItem(user_id=actor.user_id, item_id=item_id), asynchronous=False)
    return _cart(actor.user_id)


@router.delete("", response_model=CartResponse)
async def clear_cart(actor: Actor = Depends(require_actor)) -> CartResponse:
    current_domain.process(ClearCart(user_id=actor.user_id), asynchronous=False)
    return _cart(actor.user_id)
