"""Error taxonomy shared by the domain and the HTTP layer.

Each error carries a machine-readable ``kind`` and the HTTP status it maps to.
Field validation failures are raised as Protean ``ValidationError`` and are
translated to ``ValidationFailed`` at the HTTP boundary.
"""


class StorefrontError(Exception):
    kind = "InternalFailure"
    status_code = 500

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message, "details": self.details}


class Unauthenticated(StorefrontError):
    kind = "Unauthenticated"
    status_code = 401

    def __init__(self, message: str = "Authentication required", details: dict | None = None) -> None:
        super().__init__(message, details)


class Forbidden(StorefrontError):
    kind = "Forbidden"
    status_code = 403

    def __init__(self, message: str = "Insufficient permissions", details: dict | None = None) -> None:
        super().__init__(message, details)


class NotFound(StorefrontError):
    kind = "NotFound"
    status_code = 404


class InsufficientStock(StorefrontError):
    """Requested quantity exceeds the units currently in stock."""

    kind = "InsufficientStock"
    status_code = 409

    def __init__(self, product_id: str, product_name: str, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}, Requested: {requested}",
            {
                "product_id": product_id,
                "product_name": product_name,
                "available": available,
                "requested": requested,
            },
        )
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested


class Conflict(StorefrontError):
    """A unique key already exists (e.g. an order number collision)."""

    kind = "Conflict"
    status_code = 409
