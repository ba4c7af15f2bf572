"""Low-stock report: products at or under their restock threshold."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.events import LowStockDetected, ProductRestocked
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.projection
class LowStockReport:
    product_id = Identifier(identifier=True, required=True)
    name = String(required=True, max_length=255)
    sku = String(max_length=50)
    stock = Integer(default=0)
    low_stock = Integer(default=10)
    is_out_of_stock = Boolean(default=False)
    detected_at = DateTime()


@storefront.projector(projector_for=LowStockReport, aggregates=[Product])
class LowStockReportProjector:
    @on(LowStockDetected)
    def on_low_stock_detected(self, event):
        repo = current_domain.repository_for(LowStockReport)
        try:
            entry = repo.get(event.product_id)
            entry.name = event.name
            entry.sku = event.sku
            entry.stock = event.stock
            entry.low_stock = event.low_stock
            entry.is_out_of_stock = event.stock == 0
            entry.detected_at = event.detected_at
        except ObjectNotFoundError:
            entry = LowStockReport(
                product_id=event.product_id,
                name=event.name,
                sku=event.sku,
                stock=event.stock,
                low_stock=event.low_stock,
                is_out_of_stock=event.stock == 0,
                detected_at=event.detected_at,
            )
        repo.add(entry)

    @on(ProductRestocked)
    def on_product_restocked(self, event):
        if event.stock <= event.low_stock:
            return  # LowStockDetected follows and refreshes the entry

        repo = current_domain.repository_for(LowStockReport)
        try:
            repo._dao.delete(repo.get(event.product_id))
        except ObjectNotFoundError:
            pass


def low_stock_report():
    """Entries ordered by remaining stock, emptiest first."""
    return current_domain.repository_for(LowStockReport)._dao.query.order_by("stock").limit(None).all().items


def low_stock_count():
    return current_domain.repository_for(LowStockReport)._dao.query.all().total
