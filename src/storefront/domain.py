"""Storefront domain — catalogue, cart, order ledger and identity.

All aggregates live in one domain so that order placement (stock, orders and
the cart) commits or rolls back as a single Unit of Work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")

_initialized = False


def init_domain() -> Domain:
    """Initialize the storefront domain once per process."""
    global _initialized
    if not _initialized:
        storefront.init()
        _initialized = True
    return storefront
