"""Order update: status, payment status and tracking number, by the owner or an administrator."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import Forbidden, NotFound
from storefront.identity.user import ADMIN_ROLES
from storefront.order.order import Order
from storefront.settings import get_settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    status = String(max_length=20)
    payment_status = String(max_length=20)
    tracking_number = String(max_length=255)


@storefront.command_handler(part_of=Order)
class UpdateOrderHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            raise NotFound("Order not found", {"order_id": command.order_id}) from None

        if str(order.user_id) != str(command.actor_id) and command.actor_role not in ADMIN_ROLES:
            raise Forbidden("You may only update your own orders", {"order_id": command.order_id})

        order.update(
            status=command.status,
            payment_status=command.payment_status,
            tracking_number=command.tracking_number,
            updated_by=command.actor_id,
            enforce_transitions=get_settings().enforce_status_transitions,
        )
        repo.add(order)

        logger.info(
            "order_updated",
            order_id=str(order.id),
            status=order.status,
            payment_status=order.payment_status,
            actor_id=command.actor_id,
        )
        return str(order.id)
