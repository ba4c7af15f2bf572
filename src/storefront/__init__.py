"""Storefront — catalogue browsing, shopping cart, checkout and order management."""
