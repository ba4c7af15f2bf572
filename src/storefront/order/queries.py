"""Order read side for shoppers, administrators and the dashboards."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from protean.utils.query import Q

from storefront.exceptions import NotFound
from storefront.order.order import Order, OrderStatus, PaymentStatus
from storefront.utils.pagination import Page, clamp, paginate

USER_PAGE_SIZE = 10
ADMIN_PAGE_SIZE = 20


def _check_choice(enum_cls, value, field_name):
    if value is not None and value not in {member.value for member in enum_cls}:
        raise ValidationError({field_name: [f"Must be one of: {', '.join(m.value for m in enum_cls)}"]})


def list_orders_for_user(user_id, status=None, page=1, limit=None) -> Page:
    _check_choice(OrderStatus, status, "status")
    page, limit = clamp(page, limit, USER_PAGE_SIZE)

    query = current_domain.repository_for(Order)._dao.query.filter(user_id=user_id)
    if status:
        query = query.filter(status=status)
    return paginate(query.order_by("-created_at"), page, limit)


def get_order_for_user(user_id, order_id) -> Order:
    """The order, if ``user_id`` owns it; someone else's order is reported as missing."""
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        order = None
    if order is None or str(order.user_id) != str(user_id):
        raise NotFound("Order not found", {"order_id": str(order_id)})
    return order


def get_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise NotFound("Order not found", {"order_id": str(order_id)}) from None


def list_all_orders(status=None, payment_status=None, search=None, page=1, limit=None) -> Page:
    """Every order, newest first; ``search`` matches order number, customer name or email."""
    _check_choice(OrderStatus, status, "status")
    _check_choice(PaymentStatus, payment_status, "payment_status")
    page, limit = clamp(page, limit, ADMIN_PAGE_SIZE)

    query = current_domain.repository_for(Order)._dao.query
    if status:
        query = query.filter(status=status)
    if payment_status:
        query = query.filter(payment_status=payment_status)
    if search:
        query = query.filter(
            Q(order_number__icontains=search) | Q(customer_name__icontains=search) | Q(customer_email__icontains=search)
        )
    return paginate(query.order_by("-created_at"), page, limit)


def recent_orders(user_id, count=5):
    return list_orders_for_user(user_id, page=1, limit=count).items


def order_statistics():
    """Order counts per status and revenue from paid orders."""
    orders = current_domain.repository_for(Order)._dao.query.limit(None).all().items
    counts = {status.value: 0 for status in OrderStatus}
    revenue = 0.0
    for order in orders:
        counts[order.status] = counts.get(order.status, 0) + 1
        if order.payment_status == PaymentStatus.PAID.value:
            revenue += order.total
    return {"total_orders": len(orders), "orders_by_status": counts, "paid_revenue": round(revenue, 2)}
