"""Client-side mirror of a shopper's cart.

This module is a helper for API clients rather than part of the server: a
UI holds a :class:`CartMirror`, applies changes optimistically so it can
render immediately, and journals each change until the ``/cart`` endpoints
answer. The server's cart is authoritative. :meth:`CartMirror.reconcile`
adopts a server-side summary and :meth:`CartMirror.reconcile_response`
adopts the JSON body returned by ``GET /cart`` and the cart mutations, both
replacing local state wholesale. :meth:`CartMirror.rollback` returns to the
last server state.
"""

import itertools
from dataclasses import dataclass, replace

from storefront.exceptions import NotFound

PENDING_PREFIX = "pending-"


@dataclass(frozen=True)
class MirrorLine:
    item_id: str
    product_id: str
    name: str
    price: float
    quantity: int

    @property
    def is_pending(self) -> bool:
        return self.item_id.startswith(PENDING_PREFIX)


@dataclass(frozen=True)
class PendingChange:
    action: str  # add | update | remove | clear
    item_id: str | None = None
    product_id: str | None = None
    quantity: int | None = None


class CartMirror:
    def __init__(self):
        self._lines: dict[str, MirrorLine] = {}
        self._confirmed: dict[str, MirrorLine] = {}
        self._journal: list[PendingChange] = []
        self._temp_ids = itertools.count(1)

    @property
    def lines(self) -> list[MirrorLine]:
        return list(self._lines.values())

    @property
    def pending(self) -> list[PendingChange]:
        return list(self._journal)

    @property
    def subtotal(self) -> float:
        return round(sum(line.price * line.quantity for line in self._lines.values()), 2)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def item_count(self) -> int:
        return len(self._lines)

    def line_for_product(self, product_id):
        return next((line for line in self._lines.values() if line.product_id == str(product_id)), None)

    def add(self, product_id, name, price, quantity) -> MirrorLine:
        """Optimistically add ``quantity``; an existing line for the product grows."""
        existing = self.line_for_product(product_id)
        if existing:
            line = replace(existing, quantity=existing.quantity + quantity)
        else:
            line = MirrorLine(
                item_id=f"{PENDING_PREFIX}{next(self._temp_ids)}",
                product_id=str(product_id),
                name=name,
                price=price,
                quantity=quantity,
            )
        self._lines[line.item_id] = line
        self._journal.append(PendingChange("add", line.item_id, str(product_id), quantity))
        return line

    def update(self, item_id, quantity) -> MirrorLine | None:
        """Optimistically set a line's quantity; zero removes it, as on the server."""
        if quantity == 0:
            self.remove(item_id)
            return None
        line = replace(self._line(item_id), quantity=quantity)
        self._lines[item_id] = line
        self._journal.append(PendingChange("update", item_id, line.product_id, quantity))
        return line

    def remove(self, item_id):
        line = self._line(item_id)
        del self._lines[item_id]
        self._journal.append(PendingChange("remove", item_id, line.product_id))

    def clear(self):
        self._lines.clear()
        self._journal.append(PendingChange("clear"))

    def reconcile(self, summary):
        """Adopt the server's cart summary; every unconfirmed local change is dropped."""
        self._confirmed = {
            line.item_id: MirrorLine(
                item_id=line.item_id,
                product_id=line.product_id,
                name=line.name,
                price=line.price,
                quantity=line.quantity,
            )
            for line in summary.lines
        }
        self._lines = dict(self._confirmed)
        self._journal.clear()

    def reconcile_response(self, body):
        """Adopt a cart as the API returns it, ``{"items": [...], "summary": {...}}``."""
        self._confirmed = {
            item["id"]: MirrorLine(
                item_id=item["id"],
                product_id=item["product_id"],
                name=item["name"],
                price=item["price"],
                quantity=item["quantity"],
            )
            for item in body["items"]
        }
        self._lines = dict(self._confirmed)
        self._journal.clear()

    def rollback(self):
        """Discard optimistic changes after the server rejected one of them."""
        self._lines = dict(self._confirmed)
        self._journal.clear()

    def _line(self, item_id) -> MirrorLine:
        try:
            return self._lines[item_id]
        except KeyError:
            raise NotFound("Cart item not found", {"item_id": item_id}) from None
