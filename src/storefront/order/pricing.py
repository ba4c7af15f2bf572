"""Checkout pricing: tax and shipping for a cart subtotal."""

from dataclasses import dataclass

from storefront.settings import get_settings


@dataclass(frozen=True)
class Quote:
    subtotal: float
    tax_amount: float
    shipping_amount: float
    total: float

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "shipping_amount": self.shipping_amount,
            "total": self.total,
        }


def quote(subtotal, settings=None) -> Quote:
    """Shipping is free strictly above the threshold; amounts are rounded to cents."""
    settings = settings or get_settings()
    subtotal = round(subtotal, 2)
    tax_amount = round(subtotal * settings.tax_rate, 2)
    shipping_amount = 0.0 if subtotal > settings.free_shipping_threshold else settings.flat_shipping_rate
    return Quote(
        subtotal=subtotal,
        tax_amount=tax_amount,
        shipping_amount=round(shipping_amount, 2),
        total=round(subtotal + tax_amount + shipping_amount, 2),
    )
